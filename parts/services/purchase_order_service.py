import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import F, Sum

from core.numbering import next_number
from parts.models import (
    CommunicationStatus,
    CommunicationType,
    Part,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    Supplier,
)
from projects.models import Project
from . import po_timeline_service, stock_service

logger = logging.getLogger(__name__)


def generate_po_number(year: Optional[int] = None) -> str:
    """Next ``PO-YYYY-NNNN`` number for ``year`` (defaults to this year)."""
    year = year or date.today().year
    return next_number(PurchaseOrder.objects.all(), "po_number", f"PO-{year}-")


def _clean_items(items_data: Iterable[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    cleaned = []
    for idx, item in enumerate(items_data, start=1):
        try:
            qty = int(item.get("quantity_ordered") or 0)
            price = Decimal(str(item.get("unit_price") or 0))
        except (TypeError, ValueError, InvalidOperation):
            return [], f"Line {idx}: quantity and price must be numbers."
        if not item.get("part_id"):
            return [], f"Line {idx}: a part is required."
        if qty <= 0:
            return [], f"Line {idx}: quantity must be greater than zero."
        if price < 0:
            return [], f"Line {idx}: unit price cannot be negative."
        cleaned.append(
            {
                "part_id": item["part_id"],
                "quantity_ordered": qty,
                "unit_price": price,
                "notes": item.get("notes") or None,
            }
        )
    return cleaned, None


def create_po(
    po_data: Dict[str, Any], items_data: List[Dict[str, Any]]
) -> Tuple[bool, str, Optional[int]]:
    required = ["supplier_id", "order_date"]
    missing = [f for f in required if not po_data.get(f)]
    if missing:
        return False, f"Missing required fields: {', '.join(missing)}", None
    if not items_data:
        return False, "Purchase Order must contain at least one item.", None
    items, error = _clean_items(items_data)
    if error:
        return False, error, None
    project_id = po_data.get("project_id")
    if project_id and not Project.objects.filter(pk=project_id).exists():
        return False, f"Project {project_id} not found.", None
    actor = po_data.get("created_by")
    try:
        with transaction.atomic():
            supplier = Supplier.objects.get(pk=po_data["supplier_id"])
            po = PurchaseOrder.objects.create(
                po_number=generate_po_number(),
                supplier=supplier,
                order_date=po_data["order_date"],
                expected_delivery_date=po_data.get("expected_delivery_date"),
                status=po_data.get("status") or PurchaseOrderStatus.PENDING,
                notes=po_data.get("notes"),
                source_ticket_id=po_data.get("source_ticket_id"),
                project_id=project_id or None,
                created_by=actor if getattr(actor, "is_authenticated", False) else None,
            )
            for item in items:
                PurchaseOrderItem.objects.create(
                    purchase_order=po,
                    part=Part.objects.get(pk=item["part_id"]),
                    quantity_ordered=item["quantity_ordered"],
                    unit_price=item["unit_price"],
                    notes=item["notes"],
                )
    except (Supplier.DoesNotExist, Part.DoesNotExist) as exc:
        return False, f"Invalid reference: {exc}", None
    except IntegrityError as exc:
        logger.error("Integrity error creating PO: %s", exc)
        return False, "Database error creating Purchase Order.", None
    logger.info("Created purchase order %s (%s lines)", po.po_number, len(items))
    return True, f"Purchase Order {po.po_number} created", po.pk


def get_po_by_id(po_id: int) -> Optional[Dict[str, Any]]:
    try:
        po = PurchaseOrder.objects.select_related(
            "supplier", "source_ticket", "project"
        ).get(pk=po_id)
    except PurchaseOrder.DoesNotExist:
        return None
    items = [
        {
            "id": i.pk,
            "part_id": i.part_id,
            "part_number": i.part.part_number,
            "part_name": i.part.name,
            "category": i.part.get_category_display(),
            "quantity_ordered": i.quantity_ordered,
            "quantity_received": i.quantity_received,
            "remaining": i.remaining,
            "unit_price": i.unit_price,
            "total_price": i.total_price,
            "notes": i.notes,
        }
        for i in po.items.select_related("part").order_by("id")
    ]
    ordered = sum(i["quantity_ordered"] for i in items)
    received = sum(i["quantity_received"] for i in items)
    return {
        "id": po.pk,
        "po_number": po.po_number,
        "supplier_id": po.supplier_id,
        "supplier_name": po.supplier.company_name,
        "supplier_email": po.supplier.email,
        "order_date": po.order_date,
        "expected_delivery_date": po.expected_delivery_date,
        "status": po.status,
        "status_display": po.get_status_display(),
        "notes": po.notes,
        "source_ticket_id": po.source_ticket_id,
        "source_ticket_title": po.source_ticket.title if po.source_ticket_id else None,
        "project_id": po.project_id,
        "project_number": po.project.project_number if po.project_id else None,
        "project_name": po.project.name if po.project_id else None,
        "created_at": po.created_at,
        "items": items,
        "total_amount": sum((i["total_price"] for i in items), Decimal("0")),
        "total_ordered": ordered,
        "total_received": received,
        "progress": _percent(received, ordered),
    }


def _percent(received: int, ordered: int) -> int:
    if not ordered:
        return 0
    return min(int(received * 100 / ordered), 100)


def update_po_status(po_id: int, status: str, actor=None) -> Tuple[bool, str]:
    if status not in PurchaseOrderStatus.values:
        return False, f"Invalid status: {status}"
    try:
        po = PurchaseOrder.objects.get(pk=po_id)
    except PurchaseOrder.DoesNotExist:
        return False, "Purchase Order not found."
    old = po.status
    if old == status:
        return True, "Status unchanged."
    po.status = status
    po.save(update_fields=["status", "updated_at"])
    po_timeline_service.log_communication(
        po.pk,
        CommunicationType.STATUS_CHANGE,
        status=CommunicationStatus.SENT,
        subject=f"Status changed to {po.get_status_display()}",
        metadata={"old_status": old, "new_status": status},
        actor=actor,
    )
    logger.info("PO %s status %s -> %s", po.po_number, old, status)
    return True, "Status updated."


def receive_items(
    po_id: int, received: Dict[int, int], actor=None
) -> Tuple[bool, str]:
    """Book received quantities (item id -> quantity) against a PO.

    Each received unit is added to the part's stock. The order becomes
    ``partially_received`` or ``received`` depending on what is still open.
    """

    try:
        lines = {int(k): v for k, v in (received or {}).items() if v}
    except (TypeError, ValueError):
        return False, "Unknown order line."
    if not lines:
        return False, "No quantities to receive."
    try:
        with transaction.atomic():
            po = PurchaseOrder.objects.select_for_update().get(pk=po_id)
            if po.status in (PurchaseOrderStatus.CANCELLED, PurchaseOrderStatus.RECEIVED):
                return False, f"Cannot receive items on a {po.get_status_display().lower()} order."
            items = {
                i.pk: i
                for i in po.items.select_for_update().filter(pk__in=lines.keys())
            }
            for item_id, qty in lines.items():
                item = items.get(item_id)
                if item is None:
                    return False, f"Item {item_id} is not on this order."
                qty = int(qty)
                if qty < 0:
                    return False, "Received quantity cannot be negative."
                if qty > item.remaining:
                    return False, (
                        f"Cannot receive {qty} of {item.part.part_number}; "
                        f"only {item.remaining} outstanding."
                    )
            for item_id, qty in lines.items():
                qty = int(qty)
                if not qty:
                    continue
                PurchaseOrderItem.objects.filter(pk=item_id).update(
                    quantity_received=F("quantity_received") + qty
                )
                stock_service.restore_stock(items[item_id].part_id, qty)
            open_lines = po.items.filter(quantity_received__lt=F("quantity_ordered"))
            new_status = (
                PurchaseOrderStatus.PARTIALLY_RECEIVED
                if open_lines.exists()
                else PurchaseOrderStatus.RECEIVED
            )
    except PurchaseOrder.DoesNotExist:
        return False, "Purchase Order not found."
    except (TypeError, ValueError):
        return False, "Received quantities must be whole numbers."
    update_po_status(po_id, new_status, actor=actor)
    return True, "Items received."


def get_orders_progress(po_ids: Iterable[int]) -> Dict[int, Dict[str, int]]:
    rows = (
        PurchaseOrderItem.objects.filter(purchase_order_id__in=list(po_ids))
        .values("purchase_order_id")
        .annotate(ordered=Sum("quantity_ordered"), received=Sum("quantity_received"))
    )
    return {
        r["purchase_order_id"]: {
            "ordered": r["ordered"] or 0,
            "received": r["received"] or 0,
            "percent": _percent(r["received"] or 0, r["ordered"] or 0),
        }
        for r in rows
    }


def render_po_pdf(po_id: int) -> Optional[Tuple[bytes, str]]:
    """PDF bytes and filename for a stored purchase order, ``None`` if missing."""
    from django.conf import settings

    from parts.po_pdf import generate_purchase_order_pdf

    po = get_po_by_id(po_id)
    if po is None:
        return None
    supplier = Supplier.objects.get(pk=po["supplier_id"])
    project = None
    if po["project_id"]:
        linked = Project.objects.select_related("building").get(pk=po["project_id"])
        address = ", ".join(filter(None, [linked.building.address, linked.building.city]))
        project = {"name": f"{linked.project_number} {linked.name}", "address": address}
    return generate_purchase_order_pdf(
        po, settings.COMPANY_INFO, supplier, po["items"], project=project
    )
