"""Public entry point for statement normalization.

:func:`normalize_statement` runs the whole pipeline over rows that were
already read from a statement file (see :mod:`statement_ledger.ingest`):

    rows -> transactions -> period -> daily buckets
                                   -> cumulative timeline / daily closes
                                   -> totals

It is a pure function of its arguments: no I/O, no module state, no printing.
Callers may run it concurrently on independent inputs.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import date, tzinfo

from .aggregate import build_daily_buckets, compute_totals, derive_period
from .assembler import assemble_transactions
from .cumulative import attach_daily_close, build_cumulative_timeline
from .logging_setup import get_logger
from .models import Period, RawRow, StatementResult, Transaction
from .profiles import BankProfile

_logger = get_logger("statement_ledger.api")


def resolve_period(
    transactions: Iterable[Transaction],
    *,
    period_from: date | None = None,
    period_to: date | None = None,
) -> Period:
    """Derived period with explicit bounds taking precedence on either side.

    With no transactions and no explicit bounds the period is empty. When
    only one explicit bound is given and nothing survives, the other bound
    collapses onto it.
    """

    derived = derive_period(transactions)
    start = period_from or derived.start
    end = period_to or derived.end
    if start is None and end is None:
        return Period()
    if start is None:
        start = end
    if end is None:
        end = start
    if start > end:
        raise ValueError(f"period start {start} is after period end {end}")
    return Period(start=start, end=end)


def normalize_statement(
    rows: Iterable[RawRow],
    profile: BankProfile,
    *,
    zone: tzinfo,
    period_from: date | None = None,
    period_to: date | None = None,
) -> StatementResult:
    """Normalize statement rows and derive aggregates.

    Parameters
    ----------
    rows:
        Raw rows below the header row, header text -> cell value.
    profile:
        Bank profile deciding which columns hold income and expense.
    zone:
        Institutional timezone every instant and calendar day is resolved in.
    period_from, period_to:
        Optional explicit period bounds. Transactions outside the resulting
        window are dropped and the daily series span the whole window.

    Returns
    -------
    StatementResult
        Transactions in source order plus period, zero-filled daily buckets,
        per-transaction running balance, end-of-day closes and totals.
        ``elapsed_ms`` reports the time spent here.
    """

    if period_from and period_to and period_from > period_to:
        raise ValueError(f"period start {period_from} is after period end {period_to}")

    started = time.perf_counter()
    materialized = list(rows)

    transactions = assemble_transactions(materialized, profile, zone)
    if period_from or period_to:
        transactions = [
            t
            for t in transactions
            if (period_from is None or t.date >= period_from)
            and (period_to is None or t.date <= period_to)
        ]

    period = resolve_period(transactions, period_from=period_from, period_to=period_to)
    result = StatementResult(
        transactions=transactions,
        period=period,
        daily_buckets=build_daily_buckets(period, transactions, zone),
        timeline=build_cumulative_timeline(transactions),
        daily_closes=attach_daily_close(period, transactions, zone),
        totals=compute_totals(transactions),
        rows_read=len(materialized),
        rows_skipped=len(materialized) - len(transactions),
        elapsed_ms=(time.perf_counter() - started) * 1000.0,
    )
    _logger.debug(
        "normalized %d/%d rows, period=%s..%s",
        len(transactions),
        len(materialized),
        period.start,
        period.end,
    )
    return result


__all__ = ["normalize_statement", "resolve_period"]
