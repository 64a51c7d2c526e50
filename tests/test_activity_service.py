from datetime import datetime, timedelta, timezone

import pytest

from tickets.models import ActivityType, Ticket
from tickets.services import activity_service


@pytest.mark.django_db
def test_log_ticket_created_uses_system_actor(ticket_factory):
    ticket = ticket_factory()
    entry = activity_service.log_ticket_created(ticket.pk, ticket.title)
    assert entry.activity_type == ActivityType.CREATED
    assert entry.description == 'New ticket opened: "Lift stuck between floors"'
    assert entry.created_by is None
    assert entry.created_by_name == "System"


@pytest.mark.django_db
def test_actor_name_comes_from_user(ticket_factory, user):
    ticket = ticket_factory()
    entry = activity_service.log_comment(ticket.pk, "On my way", created_by=user)
    assert entry.created_by == user
    assert entry.created_by_name == "tester"


@pytest.mark.django_db
def test_status_change_uses_labels(ticket_factory):
    ticket = ticket_factory()
    entry = activity_service.log_status_change(ticket.pk, "new", "waiting_parts")
    assert entry.description == 'Status changed from "New" to "Waiting for parts"'
    assert entry.metadata == {"old_status": "new", "new_status": "waiting_parts"}


@pytest.mark.django_db
def test_note_preview_is_truncated(ticket_factory):
    ticket = ticket_factory()
    note = "x" * 150
    entry = activity_service.log_note_added(ticket.pk, note)
    assert entry.description == f'Note added: "{"x" * 100}..."'
    assert entry.metadata["note_content"] == note


@pytest.mark.django_db
def test_part_used_and_shortfall_descriptions(ticket_factory):
    ticket = ticket_factory()
    used = activity_service.log_part_used(ticket.pk, "MTR-01 Door motor", 2, usage_id=5)
    short = activity_service.log_part_shortfall(ticket.pk, "MTR-01 Door motor", 5, 2)
    assert used.description == "Part used: MTR-01 Door motor (quantity: 2)"
    assert used.metadata["usage_id"] == 5
    assert short.description == (
        "Not enough stock for MTR-01 Door motor: requested 5, missing 2. "
        "Sent to purchasing."
    )


@pytest.mark.django_db
def test_get_ticket_activities_newest_first(ticket_factory):
    ticket = ticket_factory()
    first = activity_service.log_comment(ticket.pk, "first")
    second = activity_service.log_comment(ticket.pk, "second")
    assert activity_service.get_ticket_activities(ticket.pk) == [second, first]


@pytest.mark.django_db
def test_unknown_ticket_raises():
    with pytest.raises(Ticket.DoesNotExist):
        activity_service.log_comment(424242, "hello")


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=1), "a minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=1), "an hour ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(days=1), "yesterday"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=7), "a week ago"),
        (timedelta(days=15), "2 weeks ago"),
    ],
)
def test_relative_time(delta, expected):
    now = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)
    assert activity_service.relative_time(now - delta, now=now) == expected


def test_relative_time_falls_back_to_date():
    now = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)
    value = now - timedelta(days=40)
    assert activity_service.relative_time(value, now=now) == "10/04/2024"
