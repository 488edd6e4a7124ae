"""Per-day aggregation and statement totals.

Buckets are keyed by the calendar day of each transaction's timestamp in the
configured zone. Every day of the period gets a bucket, including days without
transactions, so consumers can chart the series without gap handling.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import date, timedelta, tzinfo

from .amounts import round2
from .models import DailyBucket, Period, Totals, Transaction

_ONE_DAY = timedelta(days=1)


def iter_days(period: Period) -> Iterator[date]:
    """Yield each calendar day of ``period`` in order (nothing when empty)."""

    if period.start is None or period.end is None:
        return
    day = period.start
    while day <= period.end:
        yield day
        day += _ONE_DAY


def derive_period(transactions: Iterable[Transaction]) -> Period:
    """Smallest period covering every transaction's calendar day."""

    days = [t.date for t in transactions]
    if not days:
        return Period()
    return Period(start=min(days), end=max(days))


def build_daily_buckets(
    period: Period,
    transactions: Iterable[Transaction],
    zone: tzinfo,
) -> list[DailyBucket]:
    """Credit/debit/net per calendar day over ``period``, zero-filled.

    Transactions whose day falls outside ``period`` are ignored.
    """

    sums: dict[date, list[float]] = {day: [0.0, 0.0] for day in iter_days(period)}
    for t in transactions:
        acc = sums.get(t.ts.astimezone(zone).date())
        if acc is None:
            continue
        acc[0] += t.credit
        acc[1] += t.debit

    return [
        DailyBucket(
            date=day,
            credit=round2(credit),
            debit=round2(debit),
            net=round2(credit - debit),
        )
        for day, (credit, debit) in sums.items()
    ]


def compute_totals(transactions: Sequence[Transaction]) -> Totals:
    """Statement-wide credits, debits and net.

    Summed over transactions rather than daily buckets so the totals carry a
    single rounding step.
    """

    credits = sum(t.credit for t in transactions)
    debits = sum(t.debit for t in transactions)
    return Totals(
        credits=round2(credits),
        debits=round2(debits),
        net=round2(credits - debits),
    )


__all__ = ["build_daily_buckets", "compute_totals", "derive_period", "iter_days"]
