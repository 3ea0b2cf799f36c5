import uuid

from django.conf import settings
from django.db import models


class Company(models.Model):
    """Legal entity that invoices and budget requests are filed against."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    nip = models.CharField(max_length=20, blank=True, help_text="Tax identification number")
    address = models.TextField(blank=True)
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'companies'
        ordering = ['name']
        verbose_name_plural = 'companies'

    def __str__(self):
        return self.name


class UserCompanyPermission(models.Model):
    """
    One company a regular user may transact against.

    The rows for a user form its permission set. Accountants and admins have
    implicit access to every company and never get rows.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='company_permissions',
    )
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='user_permissions',
    )
    granted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_company_permissions'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'company'],
                name='unique_user_company_permission',
            ),
        ]

    def __str__(self):
        return f"{self.user} -> {self.company}"
