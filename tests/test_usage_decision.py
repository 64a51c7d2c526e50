from decimal import Decimal
from types import SimpleNamespace

import pytest

from parts.services.errors import InvalidInput, PersistFailed
from parts.services.usage_decision import (
    Fulfilled,
    Shortfall,
    ShortfallLine,
    UsageDecisionEngine,
    UsageRequest,
    evaluate,
)


def make_part(on_hand, pk=7, price="12.50"):
    return SimpleNamespace(
        pk=pk,
        part_number="MTR-01",
        name="Door motor",
        quantity_on_hand=on_hand,
        unit_price=Decimal(price),
    )


class FakeStore:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def insert_usage_record(self, request, actor, timestamp):
        self.calls.append((request, actor, timestamp))
        if self.error:
            raise self.error
        return SimpleNamespace(pk=99, quantity_used=request.quantity)


class FakeReplenishment:
    def __init__(self):
        self.lines = []

    def suggest_purchase_order_line(self, line):
        self.lines.append(line)


class FakeActivity:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def log_part_used(self, ticket_id, *args, **kwargs):
        if self.fail:
            raise RuntimeError("activity table unavailable")
        self.calls.append(("used", ticket_id, args, kwargs))

    def log_part_shortfall(self, ticket_id, *args, **kwargs):
        if self.fail:
            raise RuntimeError("activity table unavailable")
        self.calls.append(("shortfall", ticket_id, args, kwargs))


def make_engine(**kwargs):
    store = kwargs.pop("store", FakeStore())
    replenishment = FakeReplenishment()
    activity = kwargs.pop("activity", FakeActivity())
    engine = UsageDecisionEngine(
        store=store, replenishment=replenishment, activity=activity
    )
    return engine, store, replenishment, activity


def test_exact_stock_is_fulfilled():
    decision = evaluate(make_part(10), 10, ticket_id=3)
    assert isinstance(decision, Fulfilled)
    assert decision.request == UsageRequest(
        part_id=7, ticket_id=3, quantity=10, unit_price=Decimal("12.50")
    )


def test_partial_stock_gives_missing_quantity():
    decision = evaluate(make_part(3), 5, ticket_id=3)
    assert isinstance(decision, Shortfall)
    assert decision.line.quantity == 2
    assert decision.line.requested == 5
    assert decision.line.part_id == 7
    assert decision.line.key == (7, 3)


def test_empty_stock_gives_full_shortfall():
    decision = evaluate(make_part(0), 1)
    assert isinstance(decision, Shortfall)
    assert decision.line.quantity == 1


def test_missing_on_hand_counts_as_zero():
    decision = evaluate(make_part(None), 2)
    assert isinstance(decision, Shortfall)
    assert decision.line.quantity == 2


@pytest.mark.parametrize("qty", [0, -1, 1.5, "2", None, True])
def test_invalid_quantity_is_rejected(qty):
    with pytest.raises(InvalidInput) as exc:
        evaluate(make_part(10), qty)
    assert exc.value.code == "invalid_input"


def test_evaluate_is_repeatable():
    part = make_part(4)
    assert evaluate(part, 6, ticket_id=1) == evaluate(part, 6, ticket_id=1)
    assert part.quantity_on_hand == 4


def test_unit_price_override_and_notes_are_kept():
    decision = evaluate(
        make_part(5), 1, unit_price=Decimal("9.00"), notes="  replaced  "
    )
    assert decision.request.unit_price == Decimal("9.00")
    assert decision.request.notes == "replaced"


def test_blank_notes_become_none():
    decision = evaluate(make_part(5), 1, notes="   ")
    assert decision.request.notes is None


def test_shortfall_line_description_falls_back_to_id():
    line = ShortfallLine(part_id=4, ticket_id=None, quantity=1, requested=1)
    assert line.description == "Part 4"


def test_commit_stores_record_and_logs_activity():
    engine, store, _, activity = make_engine()
    decision = evaluate(make_part(10), 10, ticket_id=3)
    record = engine.commit(decision, actor="tech", part_description="MTR-01 Door motor")

    assert record.pk == 99
    assert record.quantity_used == 10
    request, actor, timestamp = store.calls[0]
    assert request.quantity == 10
    assert actor == "tech"
    assert timestamp is not None
    kind, ticket_id, args, kwargs = activity.calls[0]
    assert (kind, ticket_id) == ("used", 3)
    assert args == ("MTR-01 Door motor", 10)
    assert kwargs["usage_id"] == 99


def test_commit_propagates_store_failure_without_activity():
    failure = PersistFailed(PersistFailed.INSUFFICIENT_STOCK, part_id=7, requested=10)
    engine, store, _, activity = make_engine(store=FakeStore(error=failure))
    decision = evaluate(make_part(10), 10, ticket_id=3)

    with pytest.raises(PersistFailed) as exc:
        engine.commit(decision)
    assert exc.value.stock_changed
    assert len(store.calls) == 1
    assert activity.calls == []


def test_commit_rejects_shortfall():
    engine, store, _, _ = make_engine()
    with pytest.raises(InvalidInput):
        engine.commit(evaluate(make_part(0), 1))
    assert store.calls == []


def test_commit_survives_activity_failure():
    engine, store, _, _ = make_engine(activity=FakeActivity(fail=True))
    record = engine.commit(evaluate(make_part(2), 1, ticket_id=3))
    assert record.pk == 99
    assert len(store.calls) == 1


def test_commit_without_ticket_skips_activity():
    engine, _, _, activity = make_engine()
    engine.commit(evaluate(make_part(2), 1))
    assert activity.calls == []


def test_route_to_replenishment_returns_same_line():
    engine, _, replenishment, activity = make_engine()
    decision = evaluate(make_part(3), 5, ticket_id=8)
    line = engine.route_to_replenishment(decision, actor="tech")

    assert line == decision.line
    assert replenishment.lines == [decision.line]
    kind, ticket_id, args, _ = activity.calls[0]
    assert (kind, ticket_id) == ("shortfall", 8)
    assert args == ("MTR-01 Door motor", 5, 2)


def test_route_rejects_fulfilled():
    engine, _, replenishment, _ = make_engine()
    with pytest.raises(InvalidInput):
        engine.route_to_replenishment(evaluate(make_part(3), 1))
    assert replenishment.lines == []


def test_route_survives_activity_failure():
    engine, _, replenishment, _ = make_engine(activity=FakeActivity(fail=True))
    line = engine.route_to_replenishment(evaluate(make_part(0), 4, ticket_id=1))
    assert line.quantity == 4
    assert len(replenishment.lines) == 1
