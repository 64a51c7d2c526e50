"""Reorder suggestions raised by stock shortfalls and low stock."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from parts.models import Part, ReorderSuggestion, SuggestionStatus

logger = logging.getLogger(__name__)


def _update_open_suggestion(part_id, ticket_id, quantity: int) -> bool:
    existing = (
        ReorderSuggestion.objects.select_for_update()
        .filter(part_id=part_id, ticket_id=ticket_id, status=SuggestionStatus.OPEN)
        .first()
    )
    if existing is None:
        return False
    existing.quantity = quantity
    existing.save(update_fields=["quantity", "updated_at"])
    logger.info("Updated reorder suggestion %s to %s units", existing.pk, quantity)
    return True


def suggest_purchase_order_line(line) -> None:
    """Record ``line`` as an open reorder suggestion.

    Open suggestions are keyed by ``(part_id, ticket_id)``: a later shortfall
    for the same pair replaces the quantity of the existing row rather than
    adding a second one. Failures are logged and not raised.
    """

    part_id, ticket_id = line.key
    try:
        with transaction.atomic():
            if _update_open_suggestion(part_id, ticket_id, line.quantity):
                return
            try:
                with transaction.atomic():
                    suggestion = ReorderSuggestion.objects.create(
                        part_id=part_id, ticket_id=ticket_id, quantity=line.quantity
                    )
            except IntegrityError:
                # another caller opened the row after our lookup
                if _update_open_suggestion(part_id, ticket_id, line.quantity):
                    return
                raise
            logger.info(
                "Created reorder suggestion %s for part %s (%s units)",
                suggestion.pk,
                part_id,
                line.quantity,
            )
    except DatabaseError as exc:
        logger.error(
            "Could not record reorder suggestion for part %s ticket %s: %s",
            part_id,
            ticket_id,
            exc,
        )


def open_suggestions() -> List[Dict[str, Any]]:
    rows = ReorderSuggestion.objects.filter(status=SuggestionStatus.OPEN).select_related(
        "part", "ticket"
    )
    return [
        {
            "id": s.pk,
            "part_id": s.part_id,
            "part_number": s.part.part_number,
            "part_name": s.part.name,
            "ticket_id": s.ticket_id,
            "ticket_title": s.ticket.title if s.ticket_id else None,
            "quantity": s.quantity,
            "unit_price": s.part.unit_price,
            "updated_at": s.updated_at,
        }
        for s in rows
    ]


def dismiss_suggestion(suggestion_id: int) -> Tuple[bool, str]:
    updated = ReorderSuggestion.objects.filter(
        pk=suggestion_id, status=SuggestionStatus.OPEN
    ).update(status=SuggestionStatus.DISMISSED)
    if not updated:
        return False, "Suggestion not found or already closed."
    return True, "Suggestion dismissed."


def low_stock_suggestions() -> List[Dict[str, Any]]:
    """Suggested order quantities for parts at or below their reorder point.

    The quantity tops a part back up to its minimum stock level, and is at
    least one unit.
    """

    parts = Part.objects.filter(
        is_active=True, quantity_on_hand__lte=F("reorder_point")
    ).order_by("quantity_on_hand", "name")
    return [
        {
            "part_id": p.pk,
            "part_number": p.part_number,
            "part_name": p.name,
            "quantity_on_hand": p.quantity_on_hand,
            "reorder_point": p.reorder_point,
            "suggested_quantity": max(p.minimum_stock_level - p.quantity_on_hand, 1),
        }
        for p in parts
    ]


def create_po_from_suggestions(
    supplier_id: int,
    suggestion_ids: Sequence[int],
    actor=None,
    order_date: Optional[date] = None,
) -> Tuple[bool, str, Optional[int]]:
    """Turn open suggestions into one pending purchase order."""

    from . import purchase_order_service

    if not suggestion_ids:
        return False, "Select at least one suggestion.", None
    suggestions = list(
        ReorderSuggestion.objects.filter(
            pk__in=suggestion_ids, status=SuggestionStatus.OPEN
        ).select_related("part")
    )
    if len(suggestions) != len(set(suggestion_ids)):
        return False, "Some suggestions are missing or already closed.", None

    ticket_ids = {s.ticket_id for s in suggestions if s.ticket_id}
    po_data = {
        "supplier_id": supplier_id,
        "order_date": order_date or date.today(),
        "source_ticket_id": ticket_ids.pop() if len(ticket_ids) == 1 else None,
        "created_by": actor,
    }
    items = [
        {
            "part_id": s.part_id,
            "quantity_ordered": s.quantity,
            "unit_price": s.part.unit_price or 0,
            "notes": f"Ticket #{s.ticket_id}" if s.ticket_id else None,
        }
        for s in suggestions
    ]
    with transaction.atomic():
        success, msg, po_id = purchase_order_service.create_po(po_data, items)
        if not success:
            return False, msg, None
        mark_ordered([s.pk for s in suggestions], po_id)
    logger.info("Created PO %s from %s suggestions", po_id, len(suggestions))
    return True, msg, po_id


def mark_ordered(suggestion_ids: Sequence[int], po_id: int) -> int:
    """Close open suggestions that a purchase order now covers."""
    return ReorderSuggestion.objects.filter(
        pk__in=list(suggestion_ids), status=SuggestionStatus.OPEN
    ).update(status=SuggestionStatus.ORDERED, purchase_order_id=po_id)
