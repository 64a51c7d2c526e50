from decimal import Decimal

import pytest

from parts.models import PartUsage
from parts.services import stock_service
from parts.services.errors import (
    InvalidInput,
    PartNotFound,
    PersistFailed,
    TicketNotFound,
)
from parts.services.usage_decision import UsageRequest


def _request(part, ticket, quantity, price="10.00"):
    return UsageRequest(
        part_id=part.pk,
        ticket_id=ticket.pk,
        quantity=quantity,
        unit_price=Decimal(price),
    )


@pytest.mark.django_db
def test_get_part_returns_active_part(part_factory):
    part = part_factory()
    assert stock_service.get_part(part.pk) == part


@pytest.mark.django_db
@pytest.mark.parametrize("bad_id", [999999, "abc", None])
def test_get_part_missing(bad_id):
    with pytest.raises(PartNotFound):
        stock_service.get_part(bad_id)


@pytest.mark.django_db
def test_get_part_ignores_inactive(part_factory):
    part = part_factory(is_active=False)
    with pytest.raises(PartNotFound):
        stock_service.get_part(part.pk)


@pytest.mark.django_db
def test_insert_usage_record_decrements_and_stores(
    part_factory, ticket_factory, technician_factory, user
):
    tech = technician_factory()
    ticket = ticket_factory(assigned_to=tech)
    part = part_factory(quantity_on_hand=10)

    usage = stock_service.insert_usage_record(_request(part, ticket, 4), actor=user)

    part.refresh_from_db()
    assert part.quantity_on_hand == 6
    assert usage.quantity_used == 4
    assert usage.technician == tech
    assert usage.created_by == user
    assert usage.unit_price_at_use == Decimal("10.00")


@pytest.mark.django_db
def test_insert_usage_record_can_use_all_stock(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=3)
    ticket = ticket_factory()
    stock_service.insert_usage_record(_request(part, ticket, 3))
    part.refresh_from_db()
    assert part.quantity_on_hand == 0


@pytest.mark.django_db
def test_insert_usage_record_refuses_when_stock_too_low(part_factory, ticket_factory):
    part = part_factory(quantity_on_hand=2)
    ticket = ticket_factory()

    with pytest.raises(PersistFailed) as exc:
        stock_service.insert_usage_record(_request(part, ticket, 3))

    assert exc.value.reason == PersistFailed.INSUFFICIENT_STOCK
    assert exc.value.stock_changed
    part.refresh_from_db()
    assert part.quantity_on_hand == 2
    assert not PartUsage.objects.exists()


@pytest.mark.django_db
def test_insert_usage_record_unknown_ticket(part_factory):
    part = part_factory(quantity_on_hand=5)
    request = UsageRequest(part_id=part.pk, ticket_id=424242, quantity=1)
    with pytest.raises(TicketNotFound):
        stock_service.insert_usage_record(request)
    part.refresh_from_db()
    assert part.quantity_on_hand == 5


@pytest.mark.django_db
def test_insert_usage_record_unknown_part(ticket_factory):
    ticket = ticket_factory()
    request = UsageRequest(part_id=424242, ticket_id=ticket.pk, quantity=1)
    with pytest.raises(PartNotFound):
        stock_service.insert_usage_record(request)


@pytest.mark.django_db
def test_restore_stock_adds_units(part_factory):
    part = part_factory(quantity_on_hand=1)
    stock_service.restore_stock(part.pk, 4)
    part.refresh_from_db()
    assert part.quantity_on_hand == 5


@pytest.mark.django_db
def test_restore_stock_validates(part_factory):
    part = part_factory()
    with pytest.raises(InvalidInput):
        stock_service.restore_stock(part.pk, 0)
    with pytest.raises(PartNotFound):
        stock_service.restore_stock(424242, 1)


@pytest.mark.django_db
def test_low_stock_parts_and_out_of_stock_count(part_factory):
    part_factory(name="Plenty", quantity_on_hand=50, reorder_point=5)
    low = part_factory(name="Low", quantity_on_hand=2, reorder_point=5)
    empty = part_factory(name="Empty", quantity_on_hand=0, reorder_point=5)
    part_factory(name="Retired", quantity_on_hand=0, is_active=False)

    assert stock_service.low_stock_parts() == [empty, low]
    assert stock_service.low_stock_parts(limit=1) == [empty]
    assert stock_service.out_of_stock_count() == 1
