"""Stock reads and writes for parts.

Stock only changes through the conditional ``UPDATE`` statements here, so
``quantity_on_hand`` is never read-modified-written in Python.
"""

import logging
from datetime import datetime
from typing import List, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from parts.models import Part, PartUsage
from tickets.models import Ticket
from .errors import InvalidInput, PartNotFound, PersistFailed, TicketNotFound

logger = logging.getLogger(__name__)


def get_part(part_id: int) -> Part:
    """Return the active part with ``part_id`` or raise :class:`PartNotFound`."""
    try:
        return Part.objects.get(pk=part_id, is_active=True)
    except (Part.DoesNotExist, ValueError, TypeError):
        logger.warning("Part %s not found", part_id)
        raise PartNotFound(part_id) from None


def insert_usage_record(request, actor=None, timestamp: Optional[datetime] = None) -> PartUsage:
    """Decrement stock and store the usage row in one transaction.

    The decrement only applies while ``quantity_on_hand >= request.quantity``;
    otherwise nothing is written and ``PersistFailed`` is raised with reason
    ``insufficient_stock``.
    """

    try:
        with transaction.atomic():
            ticket = (
                Ticket.objects.filter(pk=request.ticket_id)
                .values("assigned_to_id")
                .first()
            )
            if ticket is None:
                raise TicketNotFound(request.ticket_id)
            updated = Part.objects.filter(
                pk=request.part_id,
                is_active=True,
                quantity_on_hand__gte=request.quantity,
            ).update(quantity_on_hand=F("quantity_on_hand") - request.quantity)
            if not updated:
                if not Part.objects.filter(pk=request.part_id, is_active=True).exists():
                    raise PartNotFound(request.part_id)
                logger.warning(
                    "Insufficient stock at write time for part %s (requested %s)",
                    request.part_id,
                    request.quantity,
                )
                raise PersistFailed(
                    PersistFailed.INSUFFICIENT_STOCK,
                    part_id=request.part_id,
                    requested=request.quantity,
                )
            kwargs = {}
            if timestamp is not None:
                kwargs["used_at"] = timestamp
            return PartUsage.objects.create(
                part_id=request.part_id,
                ticket_id=request.ticket_id,
                technician_id=ticket["assigned_to_id"],
                quantity_used=request.quantity,
                unit_price_at_use=request.unit_price,
                notes=request.notes,
                created_by=actor if getattr(actor, "is_authenticated", False) else None,
                **kwargs,
            )
    except IntegrityError as exc:
        logger.error("Integrity error storing usage for part %s: %s", request.part_id, exc)
        raise PersistFailed(PersistFailed.REJECTED, cause=exc) from exc
    except DatabaseError as exc:
        logger.error("Database error storing usage for part %s: %s", request.part_id, exc)
        raise PersistFailed(PersistFailed.REJECTED, cause=exc) from exc


def restore_stock(part_id: int, quantity: int) -> None:
    """Atomically add ``quantity`` units to a part (receipts, restorations)."""
    if quantity <= 0:
        raise InvalidInput("Quantity must be greater than zero.", quantity=quantity)
    updated = Part.objects.filter(pk=part_id).update(
        quantity_on_hand=F("quantity_on_hand") + quantity
    )
    if not updated:
        logger.warning("Part %s not found", part_id)
        raise PartNotFound(part_id)


def low_stock_parts(limit: Optional[int] = None) -> List[Part]:
    """Active parts at or below their reorder point."""
    qs = Part.objects.filter(
        is_active=True, quantity_on_hand__lte=F("reorder_point")
    ).order_by("quantity_on_hand", "name")
    if limit:
        qs = qs[:limit]
    return list(qs)


def out_of_stock_count() -> int:
    return Part.objects.filter(is_active=True, quantity_on_hand=0).count()
