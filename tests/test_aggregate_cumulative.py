from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from statement_ledger.aggregate import (
    build_daily_buckets,
    compute_totals,
    derive_period,
    iter_days,
)
from statement_ledger.cumulative import (
    attach_daily_close,
    build_cumulative_timeline,
    chronological,
)
from statement_ledger.models import Direction, Period, Transaction


def _tx(zone, when: datetime, amount: float, row: int = 0) -> Transaction:
    ts = when.replace(tzinfo=zone)
    return Transaction(
        ts=ts,
        date=ts.date(),
        description="",
        amount=amount,
        credit=max(amount, 0.0),
        debit=max(-amount, 0.0),
        direction=Direction.DEBIT if amount < 0 else Direction.CREDIT,
        row=row,
    )


def test_period_of_empty_set():
    period = derive_period([])
    assert period == Period(None, None)
    assert period.is_empty
    assert list(iter_days(period)) == []


def test_daily_buckets_fill_gaps(zone):
    txs = [
        _tx(zone, datetime(2025, 1, 1, 9), 500.0, 0),
        _tx(zone, datetime(2025, 1, 1, 10), -200.0, 1),
        _tx(zone, datetime(2025, 1, 4, 11), -50.255, 2),
    ]
    period = derive_period(txs)
    assert (period.start, period.end) == (date(2025, 1, 1), date(2025, 1, 4))

    buckets = build_daily_buckets(period, txs, zone)
    assert [b.date for b in buckets] == [date(2025, 1, d) for d in range(1, 5)]
    assert [(b.credit, b.debit, b.net) for b in buckets] == [
        (500.0, 200.0, 300.0),
        (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0),
        (0.0, 50.26, -50.26),
    ]
    assert [b.amount for b in buckets] == [b.debit for b in buckets]


def test_daily_buckets_empty_period(zone):
    assert build_daily_buckets(Period(), [], zone) == []


def test_totals_sum_transactions_not_buckets(zone):
    txs = [_tx(zone, datetime(2025, 1, d, 9), -0.333, d) for d in range(1, 4)]
    totals = compute_totals(txs)
    # Rounding each day first would give 0.99.
    assert totals.debits == 1.0
    assert totals.expenses == totals.spending == totals.debits
    assert totals.net == -1.0
    assert compute_totals([]).net == 0.0


def test_timeline_is_chronological_with_row_tiebreak(zone):
    same = datetime(2025, 1, 2, 12)
    txs = [
        _tx(zone, datetime(2025, 1, 3, 9), -50.0, 0),
        _tx(zone, same, 100.0, 2),
        _tx(zone, same, -30.0, 1),
    ]
    points = build_cumulative_timeline(txs)
    assert [p.cumulative for p in points] == [-30.0, 70.0, 20.0]
    assert [t.row for t in chronological(txs)] == [1, 2, 0]


def test_daily_close_sweep(zone):
    txs = [
        _tx(zone, datetime(2025, 1, 1, 9), 500.0, 0),
        _tx(zone, datetime(2025, 1, 1, 10), -200.0, 1),
        _tx(zone, datetime(2025, 1, 3, 23, 59, 59, 999000), -50.0, 2),
    ]
    closes = attach_daily_close(derive_period(txs), txs, zone)
    assert [c.date.day for c in closes] == [1, 2, 3]
    assert [c.cumulative_close for c in closes] == [300.0, 300.0, 250.0]


def test_daily_close_absorbs_earlier_transactions_into_first_day(zone):
    txs = [
        _tx(zone, datetime(2024, 12, 30, 9), 10.0, 0),
        _tx(zone, datetime(2025, 1, 2, 9), 5.0, 1),
        _tx(zone, datetime(2025, 1, 5, 9), 1.0, 2),
    ]
    period = Period(date(2025, 1, 1), date(2025, 1, 3))
    closes = attach_daily_close(period, txs, zone)
    assert [c.cumulative_close for c in closes] == [10.0, 15.0, 15.0]


def test_daily_close_rounds_only_on_emission(zone):
    txs = [_tx(zone, datetime(2025, 1, 1, 9) + timedelta(hours=i), 0.004, i) for i in range(3)]
    [close] = attach_daily_close(derive_period(txs), txs, zone)
    assert close.cumulative_close == 0.01
    assert [p.cumulative for p in build_cumulative_timeline(txs)] == [0.0, 0.01, 0.01]


@pytest.mark.parametrize("count", [0, 1, 5])
def test_sorted_input_is_idempotent(zone, count):
    txs = [_tx(zone, datetime(2025, 2, 1 + i % 3, 9 + i), float(i), i) for i in range(count)]
    once = chronological(txs)
    assert chronological(once) == once
    assert build_cumulative_timeline(once) == build_cumulative_timeline(txs)
