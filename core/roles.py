"""User roles, stored as Django auth groups.

A user's role is the highest-ranked role group they belong to. Superusers and
staff without a role group count as admins; everyone else without a group is
read-only. Reads are open to any signed-in user; writes are gated per view.
"""

import logging
from functools import wraps
from typing import Optional, Tuple

from django.contrib.auth.models import Group
from django.core.exceptions import PermissionDenied
from rest_framework import permissions

from .choices import CoercingChoices

logger = logging.getLogger(__name__)


class Role(CoercingChoices):
    ADMIN = "admin", "Admin"
    DISPATCHER = "dispatcher", "Dispatcher"
    TECHNICIAN = "technician", "Technician"
    READONLY = "readonly", "Read only"

    @classmethod
    def fallback(cls):
        return cls.READONLY


# office work: catalogue, suppliers, purchasing, projects
OFFICE_ROLES = (Role.ADMIN, Role.DISPATCHER)
# field work: tickets, parts used on them, attachments
FIELD_ROLES = (Role.ADMIN, Role.DISPATCHER, Role.TECHNICIAN)


def get_role(user) -> Optional[Role]:
    if user is None or not user.is_authenticated:
        return None
    names = set(user.groups.filter(name__in=Role.values).values_list("name", flat=True))
    for role in Role:
        if role.value in names:
            return role
    if user.is_superuser or user.is_staff:
        return Role.ADMIN
    return Role.READONLY


def ensure_role_groups(sender=None, **kwargs):
    """Create one auth group per role; safe to run repeatedly."""
    for role in Role:
        Group.objects.get_or_create(name=role.value)


def set_role(user, role: str) -> Tuple[bool, str]:
    if role not in Role.values:
        return False, f"Unknown role: {role}"
    ensure_role_groups()
    user.groups.remove(*Group.objects.filter(name__in=Role.values))
    user.groups.add(Group.objects.get(name=role))
    logger.info("User %s now has role %s", user.get_username(), role)
    return True, f"{user.get_username()} is now {Role(role).label.lower()}."


class RolePermission(permissions.IsAuthenticated):
    """Safe methods for any signed-in user; writes need ``view.write_roles``."""

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return get_role(request.user) in getattr(view, "write_roles", OFFICE_ROLES)


class IsRoleAdmin(permissions.IsAuthenticated):
    def has_permission(self, request, view):
        return super().has_permission(request, view) and (
            get_role(request.user) == Role.ADMIN
        )


def role_required(*roles, safe_methods_allowed: bool = True):
    """Function-view guard: requests outside ``roles`` get a 403.

    GET and HEAD pass for every role unless ``safe_methods_allowed`` is off.
    """

    def decorator(view):
        @wraps(view)
        def wrapped(request, *args, **kwargs):
            if safe_methods_allowed and request.method in permissions.SAFE_METHODS:
                return view(request, *args, **kwargs)
            if get_role(request.user) not in roles:
                logger.warning(
                    "%s denied %s %s", request.user, request.method, request.path
                )
                raise PermissionDenied
            return view(request, *args, **kwargs)

        return wrapped

    return decorator
