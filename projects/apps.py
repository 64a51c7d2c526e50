from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    """Installation and modernization jobs with milestones and linked orders."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "projects"
