from datetime import timedelta
from decimal import Decimal
from typing import Dict, List

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from django.utils import timezone

from parts.models import (
    Part,
    PartUsage,
    PurchaseOrder,
    PurchaseOrderStatus,
    ReorderSuggestion,
    SuggestionStatus,
)
from tickets.models import Ticket, TicketStatus

OPEN_PO_STATUSES = [
    PurchaseOrderStatus.PENDING,
    PurchaseOrderStatus.ORDERED,
    PurchaseOrderStatus.PARTIALLY_RECEIVED,
]


def active_parts_count() -> int:
    return Part.objects.filter(is_active=True).count()


def low_stock_count() -> int:
    """Active parts at or below their reorder point."""
    return Part.objects.filter(
        is_active=True, quantity_on_hand__lte=F("reorder_point")
    ).count()


def stock_value() -> Decimal:
    """On-hand quantity times list price over all active parts."""
    total = Part.objects.filter(is_active=True, unit_price__isnull=False).aggregate(
        total=Sum(
            ExpressionWrapper(
                F("quantity_on_hand") * F("unit_price"),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            )
        )
    )["total"]
    return total or Decimal("0")


def open_ticket_counts() -> Dict[str, int]:
    statuses = [
        TicketStatus.NEW,
        TicketStatus.ASSIGNED,
        TicketStatus.IN_PROGRESS,
        TicketStatus.WAITING_PARTS,
    ]
    counts = {
        row["status"]: row["total"]
        for row in Ticket.objects.filter(status__in=statuses)
        .values("status")
        .annotate(total=Count("id"))
    }
    return {s.value: counts.get(s.value, 0) for s in statuses}


def pending_po_status_counts() -> Dict[str, int]:
    counts = {
        row["status"]: row["total"]
        for row in PurchaseOrder.objects.filter(status__in=OPEN_PO_STATUSES)
        .values("status")
        .annotate(total=Count("id"))
    }
    return {s.value: counts.get(s.value, 0) for s in OPEN_PO_STATUSES}


def open_suggestion_count() -> int:
    return ReorderSuggestion.objects.filter(status=SuggestionStatus.OPEN).count()


def parts_used_last_30_days() -> Dict[str, object]:
    since = timezone.now() - timedelta(days=30)
    usages = PartUsage.objects.filter(used_at__gte=since)
    quantity = usages.aggregate(total=Sum("quantity_used"))["total"] or 0
    cost = sum((u.total_cost for u in usages.only("quantity_used", "unit_price_at_use")), Decimal("0"))
    return {"quantity": quantity, "cost": cost}


def most_used_parts(limit: int = 5) -> List[dict]:
    return list(
        PartUsage.objects.values("part_id", "part__part_number", "part__name")
        .annotate(total=Sum("quantity_used"))
        .order_by("-total", "part__name")[:limit]
    )
