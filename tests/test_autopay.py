import datetime
from dataclasses import replace

from autopay import (
    apply_autopays,
    autopay_transaction_id,
    process_autopays,
    resolve_scheduled_day,
    toggle_autopay,
    upcoming_autopays,
)
from models import LAST_DAY, AutopayRule, TrackerState, Transaction


def _rule(rule_id: str = "r1", day=15, **kwargs) -> AutopayRule:
    defaults = {"name": "Netflix", "amount": 199.0, "category": "Subscriptions"}
    defaults.update(kwargs)
    return AutopayRule(id=rule_id, day=day, **defaults)


def test_resolve_scheduled_day_clamps_to_month_end() -> None:
    assert resolve_scheduled_day(LAST_DAY, 2026, 2) == 28
    assert resolve_scheduled_day(LAST_DAY, 2024, 2) == 29
    assert resolve_scheduled_day(31, 2026, 4) == 30
    assert resolve_scheduled_day(10, 2026, 4) == 10


def test_process_autopays_waits_for_scheduled_day() -> None:
    new_transactions, updated = process_autopays([_rule()], [], datetime.date(2026, 3, 10))

    assert new_transactions == []
    assert updated[0].last_processed_month is None


def test_process_autopays_generates_expense_on_scheduled_day() -> None:
    new_transactions, updated = process_autopays([_rule()], [], datetime.date(2026, 3, 20))

    assert len(new_transactions) == 1
    tx = new_transactions[0]
    assert tx.id == autopay_transaction_id("r1", "2026-03") == "autopay-r1-2026-03"
    assert tx.type == "expense"
    assert tx.date == datetime.date(2026, 3, 15)
    assert tx.payment_method == "autopay"
    assert tx.description == "Netflix"
    assert tx.is_autopay
    assert tx.autopay_id == "r1"
    assert updated[0].last_processed_month == "2026-03"


def test_process_autopays_prefers_rule_description() -> None:
    rule = _rule(description="Family plan")

    new_transactions, _ = process_autopays([rule], [], datetime.date(2026, 3, 15))

    assert new_transactions[0].description == "Family plan"


def test_process_autopays_last_day_in_february() -> None:
    new_transactions, _ = process_autopays([_rule(day=LAST_DAY)], [], datetime.date(2026, 2, 28))

    assert new_transactions[0].date == datetime.date(2026, 2, 28)


def test_process_autopays_day_31_in_thirty_day_month() -> None:
    on_30th, _ = process_autopays([_rule(day=31)], [], datetime.date(2026, 4, 30))
    on_29th, _ = process_autopays([_rule(day=31)], [], datetime.date(2026, 4, 29))

    assert on_30th[0].date == datetime.date(2026, 4, 30)
    assert on_29th == []


def test_process_autopays_skips_inactive_rules() -> None:
    new_transactions, updated = process_autopays(
        [_rule(is_active=False)], [], datetime.date(2026, 3, 20)
    )

    assert new_transactions == []
    assert updated[0].last_processed_month is None


def test_process_autopays_existing_transaction_marks_month_processed() -> None:
    existing = Transaction(
        id="manual",
        type="expense",
        amount=199.0,
        category="Subscriptions",
        date=datetime.date(2026, 3, 15),
        is_autopay=True,
        autopay_id="r1",
    )

    new_transactions, updated = process_autopays([_rule()], [existing], datetime.date(2026, 3, 20))

    assert new_transactions == []
    assert updated[0].last_processed_month == "2026-03"


def test_apply_autopays_runs_at_most_once_per_month() -> None:
    state = TrackerState(autopays=(_rule(),))

    march = apply_autopays(state, datetime.date(2026, 3, 16))
    march_again = apply_autopays(march.state, datetime.date(2026, 3, 28))
    april = apply_autopays(march_again.state, datetime.date(2026, 4, 15))

    assert march.changed
    assert len(march.state.transactions) == 1
    assert not march_again.changed
    assert march_again.state.transactions == march.state.transactions
    assert april.changed
    assert [tx.id for tx in april.state.transactions] == ["autopay-r1-2026-03", "autopay-r1-2026-04"]
    assert april.state.autopays[0].last_processed_month == "2026-04"


def test_apply_autopays_after_pause_and_resume_does_not_duplicate() -> None:
    state = apply_autopays(TrackerState(autopays=(_rule(),)), datetime.date(2026, 3, 16)).state
    state = replace(state, autopays=(replace(state.autopays[0], last_processed_month=None),))

    result = apply_autopays(state, datetime.date(2026, 3, 20))

    assert len(result.state.transactions) == 1
    assert result.state.autopays[0].last_processed_month == "2026-03"


def test_upcoming_autopays_sorted_by_scheduled_day() -> None:
    rules = [
        _rule("a", day=25, name="Gym"),
        _rule("b", day=LAST_DAY, name="Rent"),
        _rule("c", day=20, name="Phone"),
        _rule("d", day=5, name="Past"),
        _rule("e", day=28, name="Paused", is_active=False),
    ]

    out = upcoming_autopays(rules, datetime.date(2026, 3, 10))

    assert out["AutopayId"].tolist() == ["c", "a", "b"]
    assert out["ScheduledDay"].tolist() == [20, 25, 31]
    assert out.iloc[-1]["ScheduledDate"] == datetime.date(2026, 3, 31)


def test_upcoming_autopays_empty() -> None:
    out = upcoming_autopays([], datetime.date(2026, 3, 10))

    assert out.empty
    assert "ScheduledDate" in out.columns


def test_toggle_autopay_pauses_and_resumes() -> None:
    state = TrackerState(autopays=(_rule(),))

    paused = toggle_autopay(state, "r1")
    resumed = toggle_autopay(paused.state, "r1")

    assert not paused.state.autopays[0].is_active
    assert paused.message == "Autopay Netflix paused"
    assert resumed.state.autopays[0].is_active


def test_toggle_autopay_unknown_rule() -> None:
    result = toggle_autopay(TrackerState(), "missing")

    assert not result.ok
    assert result.message == "Error: Autopay not found"
