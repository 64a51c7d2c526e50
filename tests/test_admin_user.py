import pytest
from django.contrib.auth import get_user_model

from core.apps import _create_admin_user


@pytest.mark.django_db
def test_default_admin_is_created_once(client, settings):
    settings.DEFAULT_ADMIN_PASSWORD = "change-me"
    User = get_user_model()
    User.objects.filter(username="admin").delete()

    _create_admin_user(sender=None)
    _create_admin_user(sender=None)

    admin = User.objects.get(username="admin")
    assert admin.is_superuser
    client.logout()
    assert client.login(username="admin", password="change-me")
