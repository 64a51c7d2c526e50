"""Decide whether a parts request can be served from stock.

:func:`evaluate` is a pure function of the part's on-hand quantity and the
requested quantity. :class:`UsageDecisionEngine` wraps it with the two
follow-up steps: committing a fulfilled request through the stock store, or
handing a shortfall to purchasing.

The on-hand quantity read before :func:`evaluate` is only a pre-check. The
store's conditional decrement is the authoritative check, so a concurrent
request that consumed the stock in between surfaces as
``PersistFailed(reason="insufficient_stock")`` from :meth:`commit`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Tuple, Union

from django.utils import timezone

from .errors import ActivityLogFailed, InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageRequest:
    part_id: int
    ticket_id: Optional[int]
    quantity: int
    unit_price: Optional[Decimal] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ShortfallLine:
    """Missing quantity for one part, offered to purchasing as a PO line."""

    part_id: int
    ticket_id: Optional[int]
    quantity: int
    requested: int
    part_number: str = ""
    part_name: str = ""

    @property
    def key(self) -> Tuple[int, Optional[int]]:
        return (self.part_id, self.ticket_id)

    @property
    def description(self) -> str:
        return " ".join(p for p in (self.part_number, self.part_name) if p) or (
            f"Part {self.part_id}"
        )


@dataclass(frozen=True)
class Fulfilled:
    request: UsageRequest


@dataclass(frozen=True)
class Shortfall:
    line: ShortfallLine


Decision = Union[Fulfilled, Shortfall]


def validate_quantity(value: Any) -> int:
    """Return ``value`` as a positive int or raise :class:`InvalidInput`."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(
            "Quantity must be a whole number.", quantity=value
        )
    if value <= 0:
        raise InvalidInput("Quantity must be greater than zero.", quantity=value)
    return value


def evaluate(
    part,
    requested_qty: int,
    ticket_id: Optional[int] = None,
    unit_price: Optional[Decimal] = None,
    notes: Optional[str] = None,
) -> Decision:
    """Compare ``requested_qty`` with ``part.quantity_on_hand``.

    Using exactly the remaining stock is fulfilled. ``unit_price`` overrides
    the part's list price on the resulting request.
    """

    requested_qty = validate_quantity(requested_qty)
    on_hand = part.quantity_on_hand or 0
    if requested_qty <= on_hand:
        price = unit_price if unit_price is not None else part.unit_price
        return Fulfilled(
            UsageRequest(
                part_id=part.pk,
                ticket_id=ticket_id,
                quantity=requested_qty,
                unit_price=price,
                notes=(notes or "").strip() or None,
            )
        )
    return Shortfall(
        ShortfallLine(
            part_id=part.pk,
            ticket_id=ticket_id,
            quantity=requested_qty - on_hand,
            requested=requested_qty,
            part_number=getattr(part, "part_number", "") or "",
            part_name=getattr(part, "name", "") or "",
        )
    )


class UsageDecisionEngine:
    """Evaluate, commit and route parts requests.

    ``store`` provides ``insert_usage_record(request, actor, timestamp)``,
    ``replenishment`` provides ``suggest_purchase_order_line(line)`` and
    ``activity`` provides ``log_part_used`` / ``log_part_shortfall``. The
    defaults are the project's service modules.
    """

    def __init__(self, store=None, replenishment=None, activity=None):
        if store is None:
            from . import stock_service as store
        if replenishment is None:
            from . import replenishment_service as replenishment
        if activity is None:
            from tickets.services import activity_service as activity
        self.store = store
        self.replenishment = replenishment
        self.activity = activity

    def evaluate(self, part, requested_qty: int, **kwargs) -> Decision:
        return evaluate(part, requested_qty, **kwargs)

    def commit(
        self,
        decision: Decision,
        actor=None,
        timestamp: Optional[datetime] = None,
        part_description: str = "",
    ):
        """Persist a fulfilled request and return the stored usage record.

        Store failures propagate unchanged (``PersistFailed``); no retry.
        """

        if not isinstance(decision, Fulfilled):
            raise InvalidInput("Only a fulfilled decision can be committed.")
        request = decision.request
        record = self.store.insert_usage_record(
            request, actor, timestamp or timezone.now()
        )
        logger.info(
            "Committed usage %s: %s x part %s on ticket %s",
            record.pk,
            request.quantity,
            request.part_id,
            request.ticket_id,
        )
        self._emit(
            "log_part_used",
            request.ticket_id,
            part_description or f"Part {request.part_id}",
            request.quantity,
            usage_id=record.pk,
            created_by=actor,
        )
        return record

    def route_to_replenishment(self, decision: Decision, actor=None) -> ShortfallLine:
        """Hand the shortfall to purchasing and return it."""

        if not isinstance(decision, Shortfall):
            raise InvalidInput("Only a shortfall can be routed to purchasing.")
        line = decision.line
        logger.warning(
            "Shortfall of %s for part %s on ticket %s (requested %s)",
            line.quantity,
            line.part_id,
            line.ticket_id,
            line.requested,
        )
        self.replenishment.suggest_purchase_order_line(line)
        self._emit(
            "log_part_shortfall",
            line.ticket_id,
            line.description,
            line.requested,
            line.quantity,
            created_by=actor,
        )
        return line

    def _emit(self, method: str, ticket_id, *args, **kwargs) -> None:
        if ticket_id is None:
            return
        try:
            getattr(self.activity, method)(ticket_id, *args, **kwargs)
        except Exception as exc:
            failure = ActivityLogFailed(
                f"Could not write activity entry for ticket {ticket_id}.",
                ticket_id=ticket_id,
            )
            logger.error("%s %s: %s", failure.code, failure.message, exc)
