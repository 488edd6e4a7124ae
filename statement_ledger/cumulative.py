"""Running balance over a statement.

Two views of the same running sum (starting at 0 before the first
transaction, inflows up, outflows down):

- :func:`build_cumulative_timeline`: one point per transaction in
  chronological order;
- :func:`attach_daily_close`: the balance at the end of each day of a period
  (``23:59:59.999`` in the configured zone), produced by a single forward sweep
  over days and ts-sorted transactions.

The accumulator keeps full precision; values are rounded only when emitted.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import tzinfo

from .aggregate import iter_days
from .amounts import round2
from .models import CumulativePoint, DailyClose, Period, Transaction
from .temporal import end_of_day


def chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by instant, ties kept in source-row order."""

    return sorted(transactions, key=lambda t: (t.ts.timestamp(), t.row))


def build_cumulative_timeline(transactions: Iterable[Transaction]) -> list[CumulativePoint]:
    running = 0.0
    points: list[CumulativePoint] = []
    for t in chronological(transactions):
        running += t.amount
        points.append(CumulativePoint(ts=t.ts, cumulative=round2(running)))
    return points


def attach_daily_close(
    period: Period,
    transactions: Iterable[Transaction],
    zone: tzinfo,
) -> list[DailyClose]:
    """Closing balance for every day of ``period``.

    Transactions dated before the period are absorbed into the first day's
    close; those after the last day are never reached.
    """

    ordered = chronological(transactions)
    closes: list[DailyClose] = []
    running = 0.0
    ti = 0
    for day in iter_days(period):
        cutoff = end_of_day(day, zone).timestamp()
        while ti < len(ordered) and ordered[ti].ts.timestamp() <= cutoff:
            running += ordered[ti].amount
            ti += 1
        closes.append(DailyClose(date=day, cumulative_close=round2(running)))
    return closes


__all__ = ["attach_daily_close", "build_cumulative_timeline", "chronological"]
