"""Recording and removing parts used on tickets."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db import transaction

from parts.models import PartUsage
from tickets.models import Ticket
from . import stock_service
from .errors import InvalidInput, TicketNotFound
from .usage_decision import (
    Fulfilled,
    ShortfallLine,
    UsageDecisionEngine,
    validate_quantity,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageOutcome:
    """Result of :func:`record_part_usage`: exactly one of the two is set."""

    usage: Optional[PartUsage] = None
    shortfall: Optional[ShortfallLine] = None

    @property
    def fulfilled(self) -> bool:
        return self.usage is not None


def _clean_price(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        price = Decimal(str(value))
    except (ArithmeticError, ValueError):
        raise InvalidInput("Unit price must be a number.", unit_price=value) from None
    if price < 0:
        raise InvalidInput("Unit price cannot be negative.", unit_price=value)
    return price


def record_part_usage(
    part_id: int,
    ticket_id: int,
    quantity: int,
    actor=None,
    unit_price=None,
    notes: Optional[str] = None,
    engine: Optional[UsageDecisionEngine] = None,
) -> UsageOutcome:
    """Use ``quantity`` units of a part on a ticket, or route the shortfall.

    Raises ``InvalidInput``, ``TicketNotFound`` or ``PartNotFound`` before
    anything is written, and ``PersistFailed`` when the store refuses the
    write.
    """

    quantity = validate_quantity(quantity)
    price = _clean_price(unit_price)
    if not Ticket.objects.filter(pk=ticket_id).exists():
        logger.warning("Ticket %s not found", ticket_id)
        raise TicketNotFound(ticket_id)

    engine = engine or UsageDecisionEngine()
    part = stock_service.get_part(part_id)
    decision = engine.evaluate(
        part, quantity, ticket_id=ticket_id, unit_price=price, notes=notes
    )
    if isinstance(decision, Fulfilled):
        usage = engine.commit(
            decision,
            actor=actor,
            part_description=f"{part.part_number} {part.name}",
        )
        return UsageOutcome(usage=usage)
    return UsageOutcome(shortfall=engine.route_to_replenishment(decision, actor=actor))


def remove_part_usage(
    usage_id: int,
    actor=None,
    restore_stock: bool = False,
    ticket_id: Optional[int] = None,
) -> bool:
    """Delete a usage row. Stock is only given back when ``restore_stock``.

    With ``ticket_id`` only a row recorded on that ticket is removed.
    """

    lookup = {"pk": usage_id}
    if ticket_id is not None:
        lookup["ticket_id"] = ticket_id
    with transaction.atomic():
        usage = PartUsage.objects.select_for_update().filter(**lookup).first()
        if usage is None:
            return False
        part_id, quantity = usage.part_id, usage.quantity_used
        usage.delete()
        if restore_stock:
            stock_service.restore_stock(part_id, quantity)
    logger.info(
        "Removed usage %s (%s x part %s, restored=%s) by %s",
        usage_id,
        quantity,
        part_id,
        restore_stock,
        getattr(actor, "username", None),
    )
    return True


def ticket_parts_summary(ticket_id: int) -> Dict[str, Any]:
    usages: List[PartUsage] = list(
        PartUsage.objects.filter(ticket_id=ticket_id).select_related(
            "part", "technician"
        )
    )
    total = sum((u.total_cost for u in usages), Decimal("0"))
    return {
        "ticket_id": ticket_id,
        "usages": usages,
        "total_quantity": sum(u.quantity_used for u in usages),
        "total_cost": total,
    }
