from django.apps import AppConfig


class AdvancesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.advances'
    label = 'advances'
