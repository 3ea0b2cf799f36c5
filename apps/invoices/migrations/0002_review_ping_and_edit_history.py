# Generated manually for the invoices app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('invoices', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name='invoice',
            name='last_review_ping',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.CreateModel(
            name='InvoiceEditHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('previous_invoice_number', models.CharField(blank=True, max_length=255, null=True)),
                ('new_invoice_number', models.CharField(blank=True, max_length=255, null=True)),
                ('previous_description', models.TextField(blank=True, null=True)),
                ('new_description', models.TextField(blank=True, null=True)),
                ('previous_ksef_number', models.CharField(blank=True, max_length=255, null=True)),
                ('new_ksef_number', models.CharField(blank=True, max_length=255, null=True)),
                ('edited_at', models.DateTimeField(auto_now_add=True)),
                ('edited_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='edit_history', to='invoices.invoice')),
            ],
            options={
                'db_table': 'invoice_edit_history',
                'ordering': ['-edited_at'],
            },
        ),
    ]
