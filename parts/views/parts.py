import logging

from django.contrib import messages
from django.db.models import F, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse

from core.roles import FIELD_ROLES, role_required
from tickets.models import Ticket
from ..forms import PartUsageForm
from ..models import Part, PartCategory, StockStatus
from ..services import list_utils, replenishment_service, supabase_categories, usage_service
from ..services.errors import PartsUsageError

logger = logging.getLogger(__name__)

STOCK_BADGES = {
    "out": "bg-red-200 text-red-800",
    "low": "bg-yellow-200 text-yellow-800",
    "ok": "bg-green-200 text-green-800",
}

PART_FILTERS = {"category": "category", "location": "location__iexact"}
PART_FLAGS = {"low_stock": Q(quantity_on_hand__lte=F("reorder_point"))}
PART_SEARCH = ["part_number", "name", "manufacturer"]
PART_SORTS = {"name", "part_number", "quantity_on_hand", "category", "unit_price"}


def _filtered_parts(params):
    return list_utils.apply_filters_sort(
        params,
        Part.objects.filter(is_active=True),
        search_fields=PART_SEARCH,
        filter_fields=PART_FILTERS,
        flag_filters=PART_FLAGS,
        allowed_sorts=PART_SORTS,
        default_sort="name",
    )


def parts_list(request):
    parts, params = _filtered_parts(request.GET)
    page_obj = list_utils.paginate(request.GET, parts)
    for p in page_obj:
        p.badge_class = STOCK_BADGES.get(p.stock_status, "")
        p.stock_label = StockStatus(p.stock_status).label
        p.category_label = supabase_categories.category_label(p.category)
    ctx = {
        "parts": page_obj,
        "page_obj": page_obj,
        "categories": supabase_categories.category_choices(),
        "querystring": list_utils.build_querystring(request.GET),
    }
    ctx.update(params)
    return render(request, "parts/parts_list.html", ctx)


def parts_export(request):
    parts, _ = _filtered_parts(request.GET)
    return list_utils.export_as_csv(
        parts,
        [
            "part_number",
            "name",
            "category",
            "manufacturer",
            "unit_price",
            "quantity_on_hand",
            "minimum_stock_level",
            "reorder_point",
            "location",
        ],
        lambda p: [
            p.part_number,
            p.name,
            PartCategory.coerce(p.category).label,
            p.manufacturer or "",
            p.unit_price if p.unit_price is not None else "",
            p.quantity_on_hand,
            p.minimum_stock_level,
            p.reorder_point,
            p.location,
        ],
        "parts.csv",
    )


@role_required(*FIELD_ROLES)
def ticket_parts(request, ticket_id: int):
    """Parts used on a ticket, with the form to use another one.

    On a shortfall the user is sent to the purchase-order form pre-filled
    from the reorder suggestion.
    """

    ticket = get_object_or_404(Ticket.objects.select_related("assigned_to"), pk=ticket_id)
    if request.method == "POST":
        form = PartUsageForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                outcome = usage_service.record_part_usage(
                    data["part"].pk,
                    ticket.pk,
                    data["quantity"],
                    actor=request.user,
                    unit_price=data.get("unit_price"),
                    notes=data.get("notes"),
                )
            except PartsUsageError as exc:
                messages.error(request, exc.message)
            else:
                if outcome.fulfilled:
                    messages.success(
                        request,
                        f"Recorded {outcome.usage.quantity_used} x {data['part'].name}.",
                    )
                    return redirect("ticket_parts", ticket_id=ticket.pk)
                line = outcome.shortfall
                messages.warning(
                    request,
                    f"Not enough stock for {line.description}: {line.quantity} "
                    "missing. Create a purchase order for the shortfall.",
                )
                suggestion = next(
                    (
                        s
                        for s in replenishment_service.open_suggestions()
                        if (s["part_id"], s["ticket_id"]) == line.key
                    ),
                    None,
                )
                url = reverse("purchase_order_create")
                if suggestion:
                    url += f"?suggestion={suggestion['id']}"
                return redirect(url)
    else:
        form = PartUsageForm()
    summary = usage_service.ticket_parts_summary(ticket.pk)
    return render(
        request,
        "parts/tickets/parts.html",
        {"ticket": ticket, "form": form, **summary},
    )


@role_required(*FIELD_ROLES)
def ticket_part_remove(request, ticket_id: int, usage_id: int):
    if request.method == "POST":
        restore = bool(request.POST.get("restore_stock"))
        if usage_service.remove_part_usage(
            usage_id, actor=request.user, restore_stock=restore, ticket_id=ticket_id
        ):
            messages.success(request, "Part usage removed.")
        else:
            messages.error(request, "Part usage not found.")
    return redirect("ticket_parts", ticket_id=ticket_id)
