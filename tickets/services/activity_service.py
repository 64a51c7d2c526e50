"""Ticket activity feed.

Every entry has an ``activity_type``, a human-readable ``description`` and a
free-form ``metadata`` dict. The typed ``log_*`` helpers build consistent
descriptions for the common events.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.utils import timezone

from tickets.models import (
    ActivityType,
    Ticket,
    TicketActivity,
    TicketSeverity,
    TicketStatus,
)

logger = logging.getLogger(__name__)

NOTE_PREVIEW_LENGTH = 100
DEFAULT_ACTOR_NAME = "System"


def _actor_name(user, override: Optional[str]) -> str:
    if override:
        return override
    if user is None:
        return DEFAULT_ACTOR_NAME
    full_name = getattr(user, "get_full_name", lambda: "")()
    return full_name or getattr(user, "username", "") or DEFAULT_ACTOR_NAME


def create_ticket_activity(
    ticket_id: int,
    activity_type: str,
    description: str,
    metadata: Optional[Dict[str, Any]] = None,
    created_by=None,
    created_by_name: Optional[str] = None,
) -> TicketActivity:
    """Append an entry to a ticket's feed.

    Raises ``Ticket.DoesNotExist`` for unknown tickets and lets database
    errors propagate; callers that treat the feed as best-effort catch them.
    """

    ticket = Ticket.objects.only("pk").get(pk=ticket_id)
    if getattr(created_by, "is_authenticated", False) is False:
        created_by = None
    return TicketActivity.objects.create(
        ticket=ticket,
        activity_type=activity_type,
        description=description,
        metadata=metadata or {},
        created_by=created_by,
        created_by_name=_actor_name(created_by, created_by_name),
    )


def get_ticket_activities(ticket_id: int) -> List[TicketActivity]:
    """Return the ticket's feed, newest first."""
    return list(
        TicketActivity.objects.filter(ticket_id=ticket_id).order_by("-created_at", "-id")
    )


def relative_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Render ``value`` relative to ``now`` ("5 minutes ago", "yesterday")."""

    now = now or timezone.now()
    minutes = int((now - value).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return "just now"
    if minutes == 1:
        return "a minute ago"
    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours == 1:
        return "an hour ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    weeks = days // 7
    if weeks == 1:
        return "a week ago"
    if weeks < 4:
        return f"{weeks} weeks ago"
    return value.strftime("%d/%m/%Y")


def log_ticket_created(ticket_id: int, title: str, created_by=None) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.CREATED,
        f'New ticket opened: "{title}"',
        created_by=created_by,
    )


def log_status_change(
    ticket_id: int, old_status: str, new_status: str, created_by=None
) -> TicketActivity:
    old_label = TicketStatus.coerce(old_status).label if old_status else "-"
    new_label = TicketStatus.coerce(new_status).label
    return create_ticket_activity(
        ticket_id,
        ActivityType.STATUS_CHANGED,
        f'Status changed from "{old_label}" to "{new_label}"',
        {"old_status": old_status, "new_status": new_status},
        created_by=created_by,
    )


def log_severity_change(
    ticket_id: int, old_severity: str, new_severity: str, created_by=None
) -> TicketActivity:
    old_label = TicketSeverity.coerce(old_severity).label if old_severity else "-"
    new_label = TicketSeverity.coerce(new_severity).label
    return create_ticket_activity(
        ticket_id,
        ActivityType.SEVERITY_CHANGED,
        f'Severity changed from "{old_label}" to "{new_label}"',
        {"old_severity": old_severity, "new_severity": new_severity},
        created_by=created_by,
    )


def log_ticket_assigned(
    ticket_id: int, technician_name: str, created_by=None
) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.ASSIGNED,
        f"Ticket assigned to technician: {technician_name}",
        {"technician_name": technician_name},
        created_by=created_by,
    )


def log_note_added(
    ticket_id: int, note: str, created_by=None, created_by_name: Optional[str] = None
) -> TicketActivity:
    preview = note[:NOTE_PREVIEW_LENGTH]
    if len(note) > NOTE_PREVIEW_LENGTH:
        preview += "..."
    return create_ticket_activity(
        ticket_id,
        ActivityType.NOTE_ADDED,
        f'Note added: "{preview}"',
        {"note_content": note},
        created_by=created_by,
        created_by_name=created_by_name,
    )


def log_part_used(
    ticket_id: int,
    part_description: str,
    quantity: int = 1,
    usage_id: Optional[int] = None,
    created_by=None,
) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.PART_USED,
        f"Part used: {part_description} (quantity: {quantity})",
        {
            "part_description": part_description,
            "quantity": quantity,
            "usage_id": usage_id,
        },
        created_by=created_by,
    )


def log_part_shortfall(
    ticket_id: int,
    part_description: str,
    requested: int,
    shortfall: int,
    created_by=None,
) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.PART_SHORTFALL,
        (
            f"Not enough stock for {part_description}: requested {requested}, "
            f"missing {shortfall}. Sent to purchasing."
        ),
        {
            "part_description": part_description,
            "requested": requested,
            "shortfall": shortfall,
        },
        created_by=created_by,
    )


def log_file_attached(
    ticket_id: int, file_name: str, file_type: Optional[str] = None, created_by=None
) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.FILE_ATTACHED,
        f"File attached: {file_name}",
        {"file_name": file_name, "file_type": file_type},
        created_by=created_by,
    )


def log_comment(
    ticket_id: int, comment: str, created_by=None, created_by_name: Optional[str] = None
) -> TicketActivity:
    return create_ticket_activity(
        ticket_id,
        ActivityType.COMMENT,
        comment,
        created_by=created_by,
        created_by_name=created_by_name,
    )
