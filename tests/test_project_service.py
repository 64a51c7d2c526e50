from datetime import date, timedelta
from decimal import Decimal

import pytest

from parts.models import PurchaseOrder
from parts.services import purchase_order_service
from projects.models import MilestoneStatus, Project, ProjectStatus
from projects.services import project_service


@pytest.mark.django_db
def test_create_project_numbers_and_defaults(project_factory):
    year = date.today().year
    first = project_factory()
    second = project_factory(project_type="Rocket", priority="urgent")

    assert first.project_number == f"PRJ-{year}-0001"
    assert second.project_number == f"PRJ-{year}-0002"
    assert first.status == ProjectStatus.PLANNING
    assert first.project_type == "modernization"
    assert second.project_type == "other"
    assert second.priority == "medium"


@pytest.mark.django_db
def test_generate_project_number_past_four_digits(building_factory):
    building = building_factory()
    for number in ["PRJ-2030-9999", "PRJ-2030-10000"]:
        Project.objects.create(
            project_number=number,
            name=number,
            client_id=building.client_id,
            building=building,
        )
    assert project_service.generate_project_number(2030) == "PRJ-2030-10001"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": "  "}, "Project name is required."),
        ({"client_id": None}, "A client is required."),
        ({"building_id": None}, "A building is required."),
        (
            {"estimated_start_date": date(2025, 5, 1), "estimated_end_date": date(2025, 4, 1)},
            "The estimated end date cannot be before the start date.",
        ),
        ({"estimated_budget": "-1"}, "Estimated budget cannot be negative."),
        ({"quoted_price": "lots"}, "Quoted price must be a number."),
        ({"lead_technician_id": 424242}, "Technician 424242 not found."),
    ],
)
def test_create_project_validation(building_factory, overrides, message):
    building = building_factory()
    details = {"name": "Door upgrade", "client_id": building.client_id, "building_id": building.pk}
    details.update(overrides)
    assert project_service.create_project(details) == (False, message, None)
    assert not Project.objects.exists()


@pytest.mark.django_db
def test_building_must_belong_to_client(building_factory):
    own = building_factory(name="North Tower")
    other = building_factory()
    ok, msg, _ = project_service.create_project(
        {"name": "Door upgrade", "client_id": other.client_id, "building_id": own.pk}
    )
    assert not ok
    assert msg == f"North Tower does not belong to {other.client.name}."


@pytest.mark.django_db
def test_update_project_keeps_missing_fields(project_factory, building_factory):
    project = project_factory(quoted_price="900")

    ok, msg = project_service.update_project(project.pk, {"name": "Full modernization"})
    assert ok, msg
    project.refresh_from_db()
    assert project.name == "Full modernization"
    assert project.quoted_price == Decimal("900")

    elsewhere = building_factory()
    ok, msg = project_service.update_project(project.pk, {"building_id": elsewhere.pk})
    assert not ok
    assert "does not belong" in msg
    assert project_service.update_project(424242, {}) == (False, "Project 424242 not found.")


@pytest.mark.django_db
def test_change_status_stamps_actual_dates(project_factory):
    project = project_factory()
    today = date.today()

    assert project_service.change_status(project.pk, "in_progress") == (
        True,
        "Status changed to In progress.",
    )
    project.refresh_from_db()
    assert project.actual_start_date == today
    assert project.actual_end_date is None

    assert project_service.change_status(project.pk, "completed")[0]
    project.refresh_from_db()
    assert project.actual_end_date == today

    assert project_service.change_status(project.pk, "completed") == (True, "Status unchanged.")
    assert project_service.change_status(project.pk, "done") == (
        False,
        "Unknown project status 'done'.",
    )


@pytest.mark.django_db
def test_milestones_order_and_progress(project_factory):
    project = project_factory()
    due = date.today() + timedelta(days=30)
    ids = []
    for name in ["Survey", "Install cab", "Handover"]:
        ok, msg, milestone_id = project_service.add_milestone(
            project.pk, {"name": name, "due_date": due}
        )
        assert ok, msg
        ids.append(milestone_id)

    assert list(project.milestones.values_list("order_index", flat=True)) == [1, 2, 3]
    assert project_service.add_milestone(project.pk, {"name": "", "due_date": due})[1] == (
        "Milestone name is required."
    )

    assert project_service.update_milestone_status(project.pk, ids[0], "completed")[0]
    assert project_service.update_milestone_status(project.pk, ids[2], "cancelled")[0]
    detail = project_service.get_project_detail(project.pk)
    assert detail["progress"] == 50
    assert detail["milestones"][0].completed_date == date.today()

    project_service.update_milestone_status(project.pk, ids[0], MilestoneStatus.IN_PROGRESS)
    assert project.milestones.get(pk=ids[0]).completed_date is None
    assert project_service.update_milestone_status(project.pk + 1, ids[1], "completed") == (
        False,
        "Milestone not found.",
    )


@pytest.mark.django_db
def test_project_cost_from_linked_orders(project_factory, po_factory, part_factory):
    project = project_factory(estimated_budget="1000", quoted_price="1500")
    po_factory([(part_factory(), 5, "20.00")], project_id=project.pk)
    cancelled = po_factory([(part_factory(), 1, "400.00")], project_id=project.pk)
    PurchaseOrder.objects.filter(pk=cancelled.pk).update(status="cancelled")
    po_factory([(part_factory(), 1, "999.00")])

    detail = project_service.get_project_detail(project.pk)

    assert detail["actual_cost"] == Decimal("100.00")
    assert detail["budget"] == Decimal("1000")
    assert detail["budget_used"] == 10
    assert detail["profit"] == Decimal("1400.00")
    assert len(detail["purchase_orders"]) == 2
    assert project_service.actual_costs([project.pk]) == {project.pk: Decimal("100.00")}
    assert any(e["type"] == "purchase_order" for e in detail["timeline"])


@pytest.mark.django_db
def test_project_stats(project_factory):
    project_factory(quoted_price="100")
    running = project_factory(quoted_price="250")
    dropped = project_factory(quoted_price="5000")
    project_service.change_status(running.pk, "in_progress")
    project_service.change_status(dropped.pk, "cancelled")

    assert project_service.project_stats() == {
        "total": 3,
        "active": 2,
        "in_progress": 1,
        "completed": 0,
        "total_value": Decimal("350"),
    }


@pytest.mark.django_db
def test_delete_project_unlinks_orders(project_factory, po_factory):
    project = project_factory()
    po = po_factory(project_id=project.pk)

    assert project_service.delete_project(project.pk) == (
        True,
        f"Project {project.project_number} deleted.",
    )
    po.refresh_from_db()
    assert po.project_id is None
    assert project_service.get_project_detail(project.pk) is None


@pytest.mark.django_db
def test_create_po_checks_project(supplier_factory, part_factory):
    ok, msg, _ = purchase_order_service.create_po(
        {"supplier_id": supplier_factory().pk, "order_date": date(2024, 3, 1), "project_id": 424242},
        [{"part_id": part_factory().pk, "quantity_ordered": 1, "unit_price": "1"}],
    )
    assert not ok
    assert msg == "Project 424242 not found."


@pytest.mark.django_db
def test_po_pdf_names_the_project(project_factory, po_factory, monkeypatch):
    project = project_factory(name="Lobby lifts")
    po = po_factory(project_id=project.pk)
    seen = {}

    def fake_pdf(po_data, company, supplier, items, project=None):
        seen["project"] = project
        return b"%PDF", "po.pdf"

    monkeypatch.setattr("parts.po_pdf.generate_purchase_order_pdf", fake_pdf)
    purchase_order_service.render_po_pdf(po.pk)

    assert seen["project"] == {
        "name": f"{project.project_number} Lobby lifts",
        "address": "1 Main St, Haifa",
    }
    assert purchase_order_service.get_po_by_id(po.pk)["project_number"] == project.project_number
