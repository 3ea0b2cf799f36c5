# Generated manually for the notifications app

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
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('budget_request_submitted', 'Budget request submitted'), ('budget_request_approved', 'Budget request approved'), ('budget_request_rejected', 'Budget request rejected'), ('budget_request_transferred', 'Budget request transferred'), ('budget_request_settled', 'Budget request settled'), ('advance_transferred', 'Advance transferred'), ('advance_settled', 'Advance settled'), ('balance_adjusted', 'Balance adjusted'), ('invoice_reviewed', 'Invoice reviewed'), ('deletion_request_submitted', 'Deletion request submitted'), ('deletion_request_reviewed', 'Deletion request reviewed')], max_length=40)),
                ('title', models.CharField(max_length=255)),
                ('message', models.TextField()),
                ('read', models.BooleanField(default=False)),
                ('invoice_id', models.UUIDField(blank=True, null=True)),
                ('company_id', models.UUIDField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'read'], name='notifications_user_read_idx'),
                ],
            },
        ),
    ]
