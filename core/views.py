from django.contrib import messages
from django.contrib.auth import get_user_model, login
from django.contrib.auth.forms import AuthenticationForm
from django.http import Http404, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render

from parts.services import kpis, replenishment_service, stock_service

from .roles import Role, get_role, role_required, set_role


def root_view(request):
    """Home page: dashboard KPIs when signed in, the login form otherwise."""
    if request.user.is_authenticated:
        data = {
            "part_count": kpis.active_parts_count(),
            "stock_value": kpis.stock_value(),
            "low_stock": kpis.low_stock_count(),
            "out_of_stock": stock_service.out_of_stock_count(),
            "low_stock_parts": stock_service.low_stock_parts(limit=5),
            "open_tickets": kpis.open_ticket_counts(),
            "pending_po_status": kpis.pending_po_status_counts(),
            "open_suggestions": kpis.open_suggestion_count(),
            "reorder": replenishment_service.low_stock_suggestions()[:5],
            "usage_30d": kpis.parts_used_last_30_days(),
            "most_used": kpis.most_used_parts(),
        }
        return render(request, "core/home.html", data)
    return login_view(request)


def login_view(request):
    form = AuthenticationForm(request, data=request.POST or None)
    if request.method == "POST" and form.is_valid():
        login(request, form.get_user())
        return redirect(request.GET.get("next") or "root")
    return render(request, "core/login.html", {"form": form})


def health_check(request):
    return HttpResponse("ok")


@role_required(Role.ADMIN, safe_methods_allowed=False)
def team_view(request):
    """Admin page listing users with a role picker for each."""
    users = get_user_model().objects.order_by("username")
    if request.method == "POST":
        user_id = request.POST.get("user", "")
        if not user_id.isdigit():
            raise Http404("User not found")
        member = get_object_or_404(users, pk=int(user_id))
        success, msg = set_role(member, request.POST.get("role", ""))
        (messages.success if success else messages.error)(request, msg)
        return redirect("team")
    for member in users:
        member.role = get_role(member)
    return render(request, "core/team.html", {"users": users, "roles": Role.choices})
