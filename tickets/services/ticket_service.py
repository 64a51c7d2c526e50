import logging
from typing import Any, Dict, Optional, Tuple

from django.db import DatabaseError, transaction

from tickets.models import Technician, Ticket, TicketSeverity, TicketStatus
from . import activity_service

logger = logging.getLogger(__name__)


def create_ticket(
    details: Dict[str, Any], created_by=None
) -> Tuple[bool, str, Optional[int]]:
    title = (details.get("title") or "").strip()
    if not title:
        return False, "Ticket title is required.", None
    try:
        with transaction.atomic():
            ticket = Ticket.objects.create(
                title=title,
                description=(details.get("description") or "").strip() or None,
                elevator_id=details.get("elevator_id"),
                severity=TicketSeverity.coerce(details.get("severity") or "medium"),
                created_by=created_by if getattr(created_by, "is_authenticated", False) else None,
            )
            activity_service.log_ticket_created(ticket.pk, title, created_by=created_by)
    except DatabaseError as exc:
        logger.error("Error creating ticket: %s", exc)
        return False, "Database error creating ticket.", None
    return True, "Ticket created", ticket.pk


def update_ticket_status(
    ticket_id: int, new_status: str, actor=None
) -> Tuple[bool, str]:
    if new_status not in TicketStatus.values:
        return False, f"Unknown ticket status '{new_status}'."
    try:
        ticket = Ticket.objects.get(pk=ticket_id)
    except Ticket.DoesNotExist:
        return False, f"Ticket {ticket_id} not found."
    old_status = ticket.status
    if old_status == new_status:
        return True, "Status unchanged."
    with transaction.atomic():
        ticket.status = new_status
        ticket.save(update_fields=["status", "updated_at"])
        activity_service.log_status_change(
            ticket.pk, old_status, new_status, created_by=actor
        )
    return True, f"Status changed to {TicketStatus(new_status).label}."


def update_ticket_severity(
    ticket_id: int, new_severity: str, actor=None
) -> Tuple[bool, str]:
    if new_severity not in TicketSeverity.values:
        return False, f"Unknown severity '{new_severity}'."
    try:
        ticket = Ticket.objects.get(pk=ticket_id)
    except Ticket.DoesNotExist:
        return False, f"Ticket {ticket_id} not found."
    old_severity = ticket.severity
    if old_severity == new_severity:
        return True, "Severity unchanged."
    with transaction.atomic():
        ticket.severity = new_severity
        ticket.save(update_fields=["severity", "updated_at"])
        activity_service.log_severity_change(
            ticket.pk, old_severity, new_severity, created_by=actor
        )
    return True, f"Severity changed to {TicketSeverity(new_severity).label}."


def assign_ticket(ticket_id: int, technician_id: int, actor=None) -> Tuple[bool, str]:
    """Assign a technician and move a new ticket to ``assigned``."""
    try:
        ticket = Ticket.objects.get(pk=ticket_id)
        technician = Technician.objects.get(pk=technician_id)
    except (Ticket.DoesNotExist, Technician.DoesNotExist, ValueError, TypeError) as exc:
        return False, f"Invalid reference: {exc}"
    with transaction.atomic():
        ticket.assigned_to = technician
        fields = ["assigned_to", "updated_at"]
        old_status = ticket.status
        if old_status == TicketStatus.NEW:
            ticket.status = TicketStatus.ASSIGNED
            fields.append("status")
        ticket.save(update_fields=fields)
        activity_service.log_ticket_assigned(
            ticket.pk, technician.full_name, created_by=actor
        )
        if old_status != ticket.status:
            activity_service.log_status_change(
                ticket.pk, old_status, ticket.status, created_by=actor
            )
    return True, f"Ticket assigned to {technician.full_name}."
