import pytest

from tickets.models import ActivityType, Ticket, TicketActivity
from tickets.services import ticket_service


@pytest.mark.django_db
def test_create_ticket_logs_activity(user):
    ok, msg, ticket_id = ticket_service.create_ticket(
        {"title": "  Door sensor fault ", "severity": "HIGH"}, created_by=user
    )
    assert ok, msg
    ticket = Ticket.objects.get(pk=ticket_id)
    assert ticket.title == "Door sensor fault"
    assert ticket.severity == "high"
    assert ticket.created_by == user
    assert TicketActivity.objects.get(ticket=ticket).activity_type == ActivityType.CREATED


@pytest.mark.django_db
def test_create_ticket_requires_title():
    ok, msg, ticket_id = ticket_service.create_ticket({"title": "  "})
    assert not ok
    assert ticket_id is None
    assert msg == "Ticket title is required."


@pytest.mark.django_db
def test_update_status(ticket_factory):
    ticket = ticket_factory()
    ok, msg = ticket_service.update_ticket_status(ticket.pk, "in_progress")
    assert ok
    assert msg == "Status changed to In progress."
    ticket.refresh_from_db()
    assert ticket.status == "in_progress"

    ok, msg = ticket_service.update_ticket_status(ticket.pk, "in_progress")
    assert ok
    assert msg == "Status unchanged."
    assert TicketActivity.objects.filter(ticket=ticket).count() == 1


@pytest.mark.django_db
def test_update_status_rejects_unknown(ticket_factory):
    ticket = ticket_factory()
    assert ticket_service.update_ticket_status(ticket.pk, "lost")[0] is False
    assert ticket_service.update_ticket_status(424242, "done")[0] is False


@pytest.mark.django_db
def test_update_severity(ticket_factory):
    ticket = ticket_factory()
    ok, msg = ticket_service.update_ticket_severity(ticket.pk, "critical")
    assert ok
    assert msg == "Severity changed to Critical."
    assert ticket_service.update_ticket_severity(ticket.pk, "critical")[1] == (
        "Severity unchanged."
    )
    assert ticket_service.update_ticket_severity(ticket.pk, "urgent")[0] is False


@pytest.mark.django_db
def test_assign_moves_new_ticket_to_assigned(ticket_factory, technician_factory):
    ticket = ticket_factory()
    tech = technician_factory()

    ok, msg = ticket_service.assign_ticket(ticket.pk, tech.pk)

    assert ok
    assert msg == "Ticket assigned to Dana Levi."
    ticket.refresh_from_db()
    assert ticket.assigned_to == tech
    assert ticket.status == "assigned"
    types = set(
        TicketActivity.objects.filter(ticket=ticket).values_list("activity_type", flat=True)
    )
    assert types == {ActivityType.ASSIGNED, ActivityType.STATUS_CHANGED}


@pytest.mark.django_db
def test_assign_keeps_later_status(ticket_factory, technician_factory):
    ticket = ticket_factory(status="in_progress")
    ok, _ = ticket_service.assign_ticket(ticket.pk, technician_factory().pk)
    assert ok
    ticket.refresh_from_db()
    assert ticket.status == "in_progress"
    assert not TicketActivity.objects.filter(
        ticket=ticket, activity_type=ActivityType.STATUS_CHANGED
    ).exists()


@pytest.mark.django_db
def test_assign_unknown_technician(ticket_factory):
    ok, msg = ticket_service.assign_ticket(ticket_factory().pk, 424242)
    assert not ok
    assert msg.startswith("Invalid reference")
