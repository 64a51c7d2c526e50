import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render

from core.roles import OFFICE_ROLES, role_required
from parts.services import list_utils

from ..forms import MilestoneForm, ProjectForm
from ..models import MilestoneStatus, Project, ProjectStatus, ProjectType
from ..services import project_service

logger = logging.getLogger(__name__)

STATUS_BADGES = {
    "planning": "bg-gray-200 text-gray-800",
    "quotation": "bg-yellow-200 text-yellow-800",
    "approved": "bg-blue-200 text-blue-800",
    "in_progress": "bg-green-200 text-green-800",
    "on_hold": "bg-orange-200 text-orange-800",
    "completed": "bg-emerald-200 text-emerald-800",
    "cancelled": "bg-red-200 text-red-800",
}


@role_required(*OFFICE_ROLES)
def projects_list(request):
    """Project cards with headline stats; ``POST`` creates a project."""
    if request.method == "POST":
        form = ProjectForm(request.POST)
        if form.is_valid():
            success, msg, project_id = project_service.create_project(
                form.service_data(), actor=request.user
            )
            if success:
                messages.success(request, msg)
                return redirect("project_detail", pk=project_id)
            messages.error(request, msg)
    else:
        form = ProjectForm()
    projects, params = list_utils.apply_filters_sort(
        request.GET,
        Project.objects.select_related("client", "building"),
        search_fields=["project_number", "name", "client__name"],
        filter_fields={"status": "status", "type": "project_type"},
        allowed_sorts={"name", "project_number", "estimated_end_date", "created_at"},
        default_sort="-created_at",
    )
    page_obj = list_utils.paginate(request.GET, projects, per_page=20)
    for p in project_service.with_figures(page_obj):
        p.badge_class = STATUS_BADGES.get(p.status, "")
    ctx = {
        "projects": page_obj,
        "page_obj": page_obj,
        "form": form,
        "stats": project_service.project_stats(),
        "statuses": ProjectStatus.choices,
        "types": ProjectType.choices,
        "querystring": list_utils.build_querystring(request.GET),
    }
    ctx.update(params)
    return render(request, "projects/list.html", ctx)


@role_required(*OFFICE_ROLES)
def project_detail(request, pk: int):
    detail = project_service.get_project_detail(pk)
    if detail is None:
        raise Http404("Project not found")
    milestone_form = MilestoneForm()
    if request.method == "POST":
        action = request.POST.get("action")
        if action == "status":
            success, msg = project_service.change_status(pk, request.POST.get("status", ""))
        elif action == "milestone":
            milestone_form = MilestoneForm(request.POST)
            if milestone_form.is_valid():
                success, msg, _ = project_service.add_milestone(pk, milestone_form.cleaned_data)
            else:
                success, msg = False, "Check the milestone fields."
        elif action == "milestone_status":
            milestone_id = request.POST.get("milestone", "")
            if not milestone_id.isdigit():
                raise Http404("Milestone not found")
            success, msg = project_service.update_milestone_status(
                pk, int(milestone_id), request.POST.get("status", "")
            )
        elif action == "delete":
            success, msg = project_service.delete_project(pk)
            if success:
                messages.success(request, msg)
                return redirect("projects_list")
        else:
            success, msg = False, "Unknown action."
        (messages.success if success else messages.error)(request, msg)
        if success or action != "milestone":
            return redirect("project_detail", pk=pk)
    return render(
        request,
        "projects/detail.html",
        {
            **detail,
            "badge_class": STATUS_BADGES.get(detail["project"].status, ""),
            "statuses": ProjectStatus.choices,
            "milestone_statuses": MilestoneStatus.choices,
            "milestone_form": milestone_form,
        },
    )
