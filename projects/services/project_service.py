"""Projects: numbering, validation, status moves, milestones and cost roll-up.

A project's actual cost is the sum of the line totals of the purchase orders
booked against it, cancelled orders excluded. Progress is the share of
completed milestones among those not cancelled.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Max, Q, Sum

from core.numbering import next_number
from parts.models import PurchaseOrderItem, PurchaseOrderStatus
from projects.models import (
    ACTIVE_PROJECT_STATUSES,
    MilestoneSource,
    MilestoneStatus,
    Project,
    ProjectMilestone,
    ProjectPriority,
    ProjectStatus,
    ProjectType,
)
from tickets.models import Building, Client, Technician

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("estimated_budget", "approved_budget", "quoted_price")
EDITABLE_FIELDS = (
    "name",
    "description",
    "project_type",
    "priority",
    "client_id",
    "building_id",
    "lead_technician_id",
    "estimated_start_date",
    "estimated_end_date",
    "notes",
) + MONEY_FIELDS


def generate_project_number(year: Optional[int] = None) -> str:
    """Next ``PRJ-YYYY-NNNN`` number for ``year`` (defaults to this year)."""
    year = year or date.today().year
    return next_number(Project.objects.all(), "project_number", f"PRJ-{year}-")


def _clean(details: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[str]]:
    name = (details.get("name") or "").strip()
    if not name:
        return {}, "Project name is required."
    if not details.get("client_id"):
        return {}, "A client is required."
    if not details.get("building_id"):
        return {}, "A building is required."
    client = Client.objects.filter(pk=details["client_id"]).first()
    if client is None:
        return {}, f"Client {details['client_id']} not found."
    building = Building.objects.filter(pk=details["building_id"]).first()
    if building is None:
        return {}, f"Building {details['building_id']} not found."
    if building.client_id != client.pk:
        return {}, f"{building.name} does not belong to {client.name}."
    lead_id = details.get("lead_technician_id")
    if lead_id and not Technician.objects.filter(pk=lead_id).exists():
        return {}, f"Technician {lead_id} not found."

    start = details.get("estimated_start_date")
    end = details.get("estimated_end_date")
    if start and end and end < start:
        return {}, "The estimated end date cannot be before the start date."

    cleaned = {
        "name": name,
        "description": (details.get("description") or "").strip() or None,
        "project_type": ProjectType.coerce(details.get("project_type") or "modernization"),
        "priority": ProjectPriority.coerce(details.get("priority") or "medium"),
        "client_id": client.pk,
        "building_id": building.pk,
        "lead_technician_id": lead_id or None,
        "estimated_start_date": start or None,
        "estimated_end_date": end or None,
        "notes": (details.get("notes") or "").strip() or None,
    }
    for field in MONEY_FIELDS:
        label = field.replace("_", " ").capitalize()
        raw = details.get(field)
        if raw in (None, ""):
            cleaned[field] = None
            continue
        try:
            amount = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            return {}, f"{label} must be a number."
        if amount < 0:
            return {}, f"{label} cannot be negative."
        cleaned[field] = amount
    return cleaned, None


def create_project(
    details: Dict[str, Any], actor=None
) -> Tuple[bool, str, Optional[int]]:
    cleaned, error = _clean(details)
    if error:
        return False, error, None
    try:
        with transaction.atomic():
            project = Project.objects.create(
                project_number=generate_project_number(),
                status=ProjectStatus.PLANNING,
                created_by=actor if getattr(actor, "is_authenticated", False) else None,
                **cleaned,
            )
    except DatabaseError as exc:
        logger.error("Error creating project: %s", exc)
        return False, "Database error creating project.", None
    logger.info("Created project %s", project.project_number)
    return True, f"Project {project.project_number} created.", project.pk


def update_project(project_id: int, details: Dict[str, Any]) -> Tuple[bool, str]:
    """Apply the editable fields present in ``details``; others are kept."""
    project = Project.objects.filter(pk=project_id).first()
    if project is None:
        return False, f"Project {project_id} not found."
    merged = {field: getattr(project, field) for field in EDITABLE_FIELDS}
    merged.update({k: v for k, v in details.items() if k in EDITABLE_FIELDS})
    cleaned, error = _clean(merged)
    if error:
        return False, error
    for field, value in cleaned.items():
        setattr(project, field, value)
    try:
        project.save()
    except DatabaseError as exc:
        logger.error("Error updating project %s: %s", project_id, exc)
        return False, "Database error updating project."
    return True, f"Project {project.project_number} updated."


def change_status(project_id: int, new_status: str) -> Tuple[bool, str]:
    """Move a project; the first move to in progress or completed stamps the
    actual start or end date."""

    if new_status not in ProjectStatus.values:
        return False, f"Unknown project status '{new_status}'."
    project = Project.objects.filter(pk=project_id).first()
    if project is None:
        return False, f"Project {project_id} not found."
    old_status = project.status
    if old_status == new_status:
        return True, "Status unchanged."
    project.status = new_status
    fields = ["status", "updated_at"]
    today = date.today()
    if new_status == ProjectStatus.IN_PROGRESS and project.actual_start_date is None:
        project.actual_start_date = today
        fields.append("actual_start_date")
    if new_status == ProjectStatus.COMPLETED:
        if project.actual_start_date is None:
            project.actual_start_date = today
            fields.append("actual_start_date")
        if project.actual_end_date is None:
            project.actual_end_date = today
            fields.append("actual_end_date")
    project.save(update_fields=fields)
    logger.info(
        "Project %s moved from %s to %s", project.project_number, old_status, new_status
    )
    return True, f"Status changed to {ProjectStatus(new_status).label}."


def delete_project(project_id: int) -> Tuple[bool, str]:
    """Delete a project and its milestones; linked orders are kept unlinked."""
    project = Project.objects.filter(pk=project_id).first()
    if project is None:
        return False, f"Project {project_id} not found."
    number = project.project_number
    project.delete()
    logger.info("Deleted project %s", number)
    return True, f"Project {number} deleted."


def project_stats() -> Dict[str, Any]:
    projects = Project.objects.all()
    value = (
        projects.exclude(status=ProjectStatus.CANCELLED)
        .aggregate(total=Sum("quoted_price"))["total"]
    )
    return {
        "total": projects.count(),
        "active": projects.filter(status__in=ACTIVE_PROJECT_STATUSES).count(),
        "in_progress": projects.filter(status=ProjectStatus.IN_PROGRESS).count(),
        "completed": projects.filter(status=ProjectStatus.COMPLETED).count(),
        "total_value": value or Decimal("0"),
    }


def _percent(part: int, whole: int) -> int:
    return int(round(part * 100 / whole)) if whole else 0


def actual_costs(project_ids: Iterable[int]) -> Dict[int, Decimal]:
    line_total = ExpressionWrapper(
        F("unit_price") * F("quantity_ordered"),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )
    rows = (
        PurchaseOrderItem.objects.filter(purchase_order__project_id__in=list(project_ids))
        .exclude(purchase_order__status=PurchaseOrderStatus.CANCELLED)
        .values("purchase_order__project_id")
        .annotate(total=Sum(line_total))
    )
    return {r["purchase_order__project_id"]: r["total"] or Decimal("0") for r in rows}


def milestone_progress(project_ids: Iterable[int]) -> Dict[int, int]:
    rows = (
        ProjectMilestone.objects.filter(project_id__in=list(project_ids))
        .exclude(status=MilestoneStatus.CANCELLED)
        .values("project_id")
        .annotate(
            total=Count("id"),
            done=Count("id", filter=Q(status=MilestoneStatus.COMPLETED)),
        )
    )
    return {r["project_id"]: _percent(r["done"], r["total"]) for r in rows}


def with_figures(projects: Iterable[Project]) -> List[Project]:
    """Set ``progress`` and ``actual_cost`` on each project for list pages."""
    projects = list(projects)
    ids = [p.pk for p in projects]
    costs = actual_costs(ids)
    progress = milestone_progress(ids)
    for p in projects:
        p.actual_cost = costs.get(p.pk, Decimal("0"))
        p.progress = progress.get(p.pk, 0)
    return projects


def _timeline(project, milestones, orders) -> List[Dict[str, Any]]:
    events = [
        {"type": "system", "date": project.created_at.date(), "title": "Project created"}
    ]
    if project.actual_start_date:
        events.append(
            {"type": "status_change", "date": project.actual_start_date, "title": "Work started"}
        )
    if project.actual_end_date:
        events.append(
            {"type": "status_change", "date": project.actual_end_date, "title": "Project completed"}
        )
    for m in milestones:
        if m.status == MilestoneStatus.COMPLETED and m.completed_date:
            events.append(
                {"type": "milestone", "date": m.completed_date, "title": f"Milestone completed: {m.name}"}
            )
    for o in orders:
        events.append(
            {"type": "purchase_order", "date": o["order_date"], "title": f"Purchase order {o['po_number']} placed"}
        )
    events.sort(key=lambda e: e["date"], reverse=True)
    return events


def get_project_detail(project_id: int) -> Optional[Dict[str, Any]]:
    project = (
        Project.objects.select_related("client", "building", "lead_technician")
        .filter(pk=project_id)
        .first()
    )
    if project is None:
        return None
    milestones = list(project.milestones.all())
    orders = [
        {
            "id": o.pk,
            "po_number": o.po_number,
            "supplier_name": o.supplier.company_name,
            "status": o.status,
            "status_display": o.get_status_display(),
            "order_date": o.order_date,
            "total_amount": o.total_amount,
        }
        for o in project.purchase_orders.select_related("supplier")
        .prefetch_related("items")
        .order_by("-order_date", "-id")
    ]
    actual_cost = sum(
        (o["total_amount"] for o in orders if o["status"] != PurchaseOrderStatus.CANCELLED),
        Decimal("0"),
    )
    budget = project.budget
    counted = [m for m in milestones if m.status != MilestoneStatus.CANCELLED]
    done = sum(1 for m in counted if m.status == MilestoneStatus.COMPLETED)
    return {
        "project": project,
        "milestones": milestones,
        "purchase_orders": orders,
        "progress": _percent(done, len(counted)),
        "completed_milestones": done,
        "actual_cost": actual_cost,
        "budget": budget,
        "budget_used": _percent(actual_cost, budget) if budget else None,
        "profit": project.quoted_price - actual_cost if project.quoted_price is not None else None,
        "timeline": _timeline(project, milestones, orders),
    }


def add_milestone(
    project_id: int, details: Dict[str, Any]
) -> Tuple[bool, str, Optional[int]]:
    name = (details.get("name") or "").strip()
    if not name:
        return False, "Milestone name is required.", None
    if not details.get("due_date"):
        return False, "A due date is required.", None
    with transaction.atomic():
        project = Project.objects.select_for_update().filter(pk=project_id).first()
        if project is None:
            return False, f"Project {project_id} not found.", None
        last = project.milestones.aggregate(last=Max("order_index"))["last"] or 0
        milestone = ProjectMilestone.objects.create(
            project=project,
            name=name,
            description=(details.get("description") or "").strip() or None,
            due_date=details["due_date"],
            is_critical=bool(details.get("is_critical")),
            order_index=last + 1,
            source=MilestoneSource.MANUAL,
        )
    return True, f"Milestone {name} added.", milestone.pk


def update_milestone_status(
    project_id: int, milestone_id: int, new_status: str
) -> Tuple[bool, str]:
    if new_status not in MilestoneStatus.values:
        return False, f"Unknown milestone status '{new_status}'."
    milestone = ProjectMilestone.objects.filter(pk=milestone_id, project_id=project_id).first()
    if milestone is None:
        return False, "Milestone not found."
    milestone.status = new_status
    milestone.completed_date = date.today() if new_status == MilestoneStatus.COMPLETED else None
    milestone.save(update_fields=["status", "completed_date"])
    return True, f"{milestone.name}: {MilestoneStatus(new_status).label}."
