from decimal import Decimal

import pytest

from parts.models import PartUsage, ReorderSuggestion, SuggestionStatus
from parts.services import stock_service, usage_service
from parts.services.errors import (
    InvalidInput,
    PartNotFound,
    PersistFailed,
    TicketNotFound,
)
from parts.services.usage_decision import UsageDecisionEngine
from tickets.models import ActivityType, TicketActivity


@pytest.mark.django_db
def test_full_stock_is_used(part_factory, ticket_factory, user):
    part = part_factory(quantity_on_hand=10)
    ticket = ticket_factory()

    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 10, actor=user)

    assert outcome.fulfilled
    assert outcome.usage.quantity_used == 10
    assert outcome.shortfall is None
    part.refresh_from_db()
    assert part.quantity_on_hand == 0
    activity = TicketActivity.objects.get(ticket=ticket)
    assert activity.activity_type == ActivityType.PART_USED
    assert activity.metadata["usage_id"] == outcome.usage.pk


@pytest.mark.django_db
def test_shortfall_creates_reorder_suggestion(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=3)
    ticket = ticket_factory()

    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 5)

    assert not outcome.fulfilled
    assert outcome.shortfall.quantity == 2
    assert outcome.shortfall.part_id == part.pk
    part.refresh_from_db()
    assert part.quantity_on_hand == 3
    assert not PartUsage.objects.exists()
    suggestion = ReorderSuggestion.objects.get()
    assert (suggestion.part_id, suggestion.ticket_id) == (part.pk, ticket.pk)
    assert suggestion.quantity == 2
    assert suggestion.status == SuggestionStatus.OPEN
    assert TicketActivity.objects.filter(
        ticket=ticket, activity_type=ActivityType.PART_SHORTFALL
    ).exists()


@pytest.mark.django_db
def test_repeated_shortfall_updates_open_suggestion(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=0)
    ticket = ticket_factory()

    usage_service.record_part_usage(part.pk, ticket.pk, 1)
    usage_service.record_part_usage(part.pk, ticket.pk, 4)

    suggestion = ReorderSuggestion.objects.get()
    assert suggestion.quantity == 4


@pytest.mark.django_db
def test_shortfalls_on_different_tickets_stay_apart(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=0)
    usage_service.record_part_usage(part.pk, ticket_factory().pk, 1)
    usage_service.record_part_usage(part.pk, ticket_factory().pk, 2)
    assert ReorderSuggestion.objects.count() == 2


@pytest.mark.django_db
def test_stock_taken_between_check_and_write(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=3)
    ticket = ticket_factory()
    engine = UsageDecisionEngine()

    first = engine.evaluate(stock_service.get_part(part.pk), 2, ticket_id=ticket.pk)
    second = engine.evaluate(stock_service.get_part(part.pk), 2, ticket_id=ticket.pk)
    engine.commit(first)

    with pytest.raises(PersistFailed) as exc:
        engine.commit(second)

    assert exc.value.stock_changed
    part.refresh_from_db()
    assert part.quantity_on_hand == 1
    assert PartUsage.objects.count() == 1


@pytest.mark.django_db
def test_invalid_quantity_writes_nothing(part_factory, ticket_factory):
    part = part_factory()
    ticket = ticket_factory()
    with pytest.raises(InvalidInput):
        usage_service.record_part_usage(part.pk, ticket.pk, 0)
    assert not PartUsage.objects.exists()
    assert not TicketActivity.objects.exists()


@pytest.mark.django_db
def test_negative_unit_price_rejected(part_factory, ticket_factory):
    part = part_factory()
    ticket = ticket_factory()
    with pytest.raises(InvalidInput):
        usage_service.record_part_usage(part.pk, ticket.pk, 1, unit_price="-1")


@pytest.mark.django_db
def test_unit_price_override(part_factory, ticket_factory):
    part = part_factory(unit_price=Decimal("10.00"))
    ticket = ticket_factory()
    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 2, unit_price="7.5")
    assert outcome.usage.unit_price_at_use == Decimal("7.50")
    assert outcome.usage.total_cost == Decimal("15.00")


@pytest.mark.django_db
def test_unknown_ticket_and_part(part_factory, ticket_factory):
    part = part_factory()
    with pytest.raises(TicketNotFound):
        usage_service.record_part_usage(part.pk, 424242, 1)
    with pytest.raises(PartNotFound):
        usage_service.record_part_usage(424242, ticket_factory().pk, 1)


@pytest.mark.django_db
def test_remove_usage_keeps_stock_by_default(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=5)
    ticket = ticket_factory()
    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 2)

    assert usage_service.remove_part_usage(outcome.usage.pk)

    part.refresh_from_db()
    assert part.quantity_on_hand == 3
    assert not PartUsage.objects.exists()


@pytest.mark.django_db
def test_remove_usage_can_restore_stock(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=5)
    ticket = ticket_factory()
    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 2)

    assert usage_service.remove_part_usage(outcome.usage.pk, restore_stock=True)

    part.refresh_from_db()
    assert part.quantity_on_hand == 5


@pytest.mark.django_db
def test_remove_usage_scoped_to_ticket(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=5)
    ticket = ticket_factory()
    other = ticket_factory()
    outcome = usage_service.record_part_usage(part.pk, ticket.pk, 2)

    assert (
        usage_service.remove_part_usage(
            outcome.usage.pk, restore_stock=True, ticket_id=other.pk
        )
        is False
    )
    assert PartUsage.objects.filter(pk=outcome.usage.pk).exists()

    assert usage_service.remove_part_usage(outcome.usage.pk, ticket_id=ticket.pk)
    assert not PartUsage.objects.exists()


@pytest.mark.django_db
def test_remove_missing_usage():
    assert usage_service.remove_part_usage(424242) is False


@pytest.mark.django_db
def test_ticket_parts_summary(part_factory, ticket_factory):
    ticket = ticket_factory()
    motor = part_factory(unit_price=Decimal("100.00"))
    cable = part_factory(unit_price=Decimal("2.50"))
    usage_service.record_part_usage(motor.pk, ticket.pk, 1)
    usage_service.record_part_usage(cable.pk, ticket.pk, 4)
    usage_service.record_part_usage(cable.pk, ticket_factory().pk, 1)

    summary = usage_service.ticket_parts_summary(ticket.pk)

    assert summary["ticket_id"] == ticket.pk
    assert len(summary["usages"]) == 2
    assert summary["total_quantity"] == 5
    assert summary["total_cost"] == Decimal("110.00")
