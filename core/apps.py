import logging

from django.apps import AppConfig
from django.conf import settings
from django.db.models.signals import post_migrate

logger = logging.getLogger(__name__)


def _create_admin_user(sender, **kwargs):
    """Create an ``admin`` superuser after migrate when none exists."""

    from django.contrib.auth import get_user_model

    User = get_user_model()
    if not User.objects.filter(username="admin").exists():
        User.objects.create_superuser(
            "admin", email="", password=settings.DEFAULT_ADMIN_PASSWORD
        )
        logger.warning("Created default admin user; change its password")


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self):  # pragma: no cover - executed via Django startup
        from liftdesk.logging import configure_logging

        from .roles import ensure_role_groups

        configure_logging()
        post_migrate.connect(ensure_role_groups, dispatch_uid="core.ensure_role_groups")
        if getattr(settings, "CREATE_DEFAULT_ADMIN", False):
            post_migrate.connect(
                _create_admin_user, dispatch_uid="core.create_admin_user"
            )
