from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Service tickets, the sites they belong to and their activity feed."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "tickets"
