# Generated manually for the ledger app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='LedgerTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sequence', models.PositiveIntegerField(editable=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('balance_before', models.DecimalField(decimal_places=2, max_digits=12)),
                ('balance_after', models.DecimalField(decimal_places=2, max_digits=12)),
                ('transaction_type', models.CharField(choices=[('zasilenie', 'Top-up'), ('advance_credit', 'Advance credit'), ('adjustment', 'Manual adjustment'), ('invoice_deduction', 'Invoice deduction'), ('invoice_refund', 'Correction refund'), ('invoice_delete_refund', 'Deleted invoice refund')], max_length=30)),
                ('reference_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledger_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'ledger_transactions',
                'ordering': ['user', 'sequence'],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'sequence'), name='unique_ledger_sequence_per_user'),
                ],
                'indexes': [
                    models.Index(fields=['user', '-created_at'], name='ledger_user_created_idx'),
                    models.Index(fields=['transaction_type'], name='ledger_type_idx'),
                ],
            },
        ),
    ]
