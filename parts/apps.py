from django.apps import AppConfig


class PartsConfig(AppConfig):
    """Spare parts, their usage on tickets and purchasing."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "parts"
