import logging
from datetime import date
from typing import Any

from django.contrib import messages
from django.http import Http404, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render

from core.roles import OFFICE_ROLES, role_required

from ..forms import PurchaseOrderForm, PurchaseOrderItemFormSet, SendPurchaseOrderForm
from ..models import (
    CommunicationStatus,
    CommunicationType,
    PurchaseOrder,
    PurchaseOrderStatus,
    ReorderSuggestion,
    SuggestionStatus,
    Supplier,
)
from ..services import (
    list_utils,
    po_email_service,
    po_timeline_service,
    purchase_order_service,
    replenishment_service,
)

logger = logging.getLogger(__name__)

PO_STATUS_BADGES = {
    "pending": "bg-gray-200 text-gray-800",
    "ordered": "bg-blue-200 text-blue-800",
    "partially_received": "bg-yellow-200 text-yellow-800",
    "received": "bg-green-200 text-green-800",
    "cancelled": "bg-red-200 text-red-800",
}


def purchase_orders_list(request):
    orders = PurchaseOrder.objects.select_related("supplier")
    filters = {
        "status": "status",
        "supplier": "supplier_id",
        "start_date": "order_date__gte",
        "end_date": "order_date__lte",
    }
    orders, params = list_utils.apply_filters_sort(
        request.GET,
        orders,
        search_fields=["po_number", "supplier__company_name"],
        filter_fields=filters,
        allowed_sorts={"order_date", "po_number", "status"},
        default_sort="-order_date",
    )
    page_obj = list_utils.paginate(request.GET, orders, per_page=20)
    progress = purchase_order_service.get_orders_progress([o.pk for o in page_obj])
    for o in page_obj:
        o.badge_class = PO_STATUS_BADGES.get(o.status, "")
        o.progress = progress.get(o.pk, {"percent": 0})["percent"]
    ctx = {
        "orders": page_obj,
        "page_obj": page_obj,
        "statuses": PurchaseOrderStatus.choices,
        "suppliers": Supplier.objects.filter(is_active=True),
        "suggestions": replenishment_service.open_suggestions(),
        "querystring": list_utils.build_querystring(request.GET),
    }
    ctx.update(params)
    return render(request, "parts/purchase_orders/list.html", ctx)


def _suggestion_initial(request):
    suggestion_id = request.GET.get("suggestion")
    if not suggestion_id:
        return None, {}, []
    suggestion = (
        ReorderSuggestion.objects.select_related("part")
        .filter(pk=suggestion_id, status=SuggestionStatus.OPEN)
        .first()
    )
    if suggestion is None:
        messages.info(request, "That reorder suggestion is no longer open.")
        return None, {}, []
    header = {"order_date": date.today(), "source_ticket": suggestion.ticket_id}
    lines = [
        {
            "part": suggestion.part_id,
            "quantity_ordered": suggestion.quantity,
            "unit_price": suggestion.part.unit_price,
            "notes": f"Ticket #{suggestion.ticket_id}" if suggestion.ticket_id else "",
        }
    ]
    return suggestion, header, lines


@role_required(*OFFICE_ROLES)
def purchase_order_create(request):
    suggestion, header, lines = _suggestion_initial(request)
    if request.method == "POST":
        form = PurchaseOrderForm(request.POST)
        formset = PurchaseOrderItemFormSet(request.POST, prefix="items")
        if form.is_valid() and formset.is_valid():
            po_data = {
                "supplier_id": form.cleaned_data["supplier"].pk,
                "order_date": form.cleaned_data["order_date"],
                "expected_delivery_date": form.cleaned_data.get("expected_delivery_date"),
                "notes": form.cleaned_data.get("notes"),
                "source_ticket_id": getattr(form.cleaned_data.get("source_ticket"), "pk", None),
                "project_id": getattr(form.cleaned_data.get("project"), "pk", None),
                "created_by": request.user,
            }
            items_data: list[dict[str, Any]] = []
            for item_form in formset.cleaned_data:
                if item_form and not item_form.get("DELETE", False):
                    items_data.append(
                        {
                            "part_id": item_form["part"].pk,
                            "quantity_ordered": item_form["quantity_ordered"],
                            "unit_price": item_form.get("unit_price") or 0,
                            "notes": item_form.get("notes"),
                        }
                    )
            success, msg, po_id = purchase_order_service.create_po(po_data, items_data)
            if success:
                if suggestion is not None:
                    replenishment_service.mark_ordered([suggestion.pk], po_id)
                messages.success(request, msg)
                return redirect("purchase_order_detail", pk=po_id)
            messages.error(request, msg)
    else:
        initial = header or {"order_date": date.today()}
        if request.GET.get("project", "").isdigit():
            initial["project"] = int(request.GET["project"])
        form = PurchaseOrderForm(initial=initial)
        formset = PurchaseOrderItemFormSet(prefix="items", initial=lines)
        if lines:
            formset.extra = len(lines)
    return render(
        request,
        "parts/purchase_orders/form.html",
        {"form": form, "formset": formset, "suggestion": suggestion},
    )


@role_required(*OFFICE_ROLES)
def purchase_order_detail(request, pk: int):
    po = purchase_order_service.get_po_by_id(pk)
    if po is None:
        raise Http404("Purchase order not found")
    if request.method == "POST":
        action = request.POST.get("action")
        if action == "status":
            success, msg = purchase_order_service.update_po_status(
                pk, request.POST.get("status", ""), actor=request.user
            )
        elif action == "receive":
            received = {
                key[len("item_"):]: request.POST[key]
                for key in request.POST
                if key.startswith("item_") and request.POST[key].strip()
            }
            success, msg = purchase_order_service.receive_items(
                pk, received, actor=request.user
            )
        elif action == "note":
            success = po_timeline_service.add_note(
                pk, request.POST.get("note", ""), actor=request.user
            ) is not None
            msg = "Note added." if success else "Note cannot be empty."
        else:
            success, msg = False, "Unknown action."
        (messages.success if success else messages.error)(request, msg)
        return redirect("purchase_order_detail", pk=pk)
    return render(
        request,
        "parts/purchase_orders/detail.html",
        {
            "po": po,
            "badge_class": PO_STATUS_BADGES.get(po["status"], ""),
            "statuses": PurchaseOrderStatus.choices,
            "timeline": po_timeline_service.get_timeline(pk),
        },
    )


def purchase_order_pdf(request, pk: int):
    get_object_or_404(PurchaseOrder, pk=pk)
    try:
        content, filename = purchase_order_service.render_po_pdf(pk)
    except ValueError as exc:
        messages.error(request, str(exc))
        return redirect("purchase_order_detail", pk=pk)
    po_timeline_service.log_communication(
        pk,
        CommunicationType.PDF_DOWNLOADED,
        status=CommunicationStatus.SENT,
        metadata={"filename": filename},
        actor=request.user,
    )
    response = HttpResponse(content, content_type="application/pdf")
    disposition = "inline" if request.GET.get("inline") else "attachment"
    response["Content-Disposition"] = f'{disposition}; filename="{filename}"'
    return response


@role_required(*OFFICE_ROLES)
def purchase_order_send(request, pk: int):
    po = purchase_order_service.get_po_by_id(pk)
    if po is None:
        raise Http404("Purchase order not found")
    if request.method == "POST":
        form = SendPurchaseOrderForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            success, msg = po_email_service.send_purchase_order_email(
                pk,
                data["to"],
                cc=data.get("cc"),
                subject=data["subject"],
                message=data["message"],
                actor=request.user,
            )
            if success:
                messages.success(request, msg)
                return redirect("purchase_order_detail", pk=pk)
            messages.error(request, msg)
    else:
        form = SendPurchaseOrderForm(
            initial={
                "to": po["supplier_email"] or "",
                "subject": po_email_service.default_email_subject(po),
                "message": po_email_service.default_email_message(po),
            }
        )
    return render(request, "parts/purchase_orders/send.html", {"form": form, "po": po})
