from django.apps import AppConfig


class BudgetRequestsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.budget_requests'
    label = 'budget_requests'
