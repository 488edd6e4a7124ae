"""Records produced by the statement normalization pipeline.

All records are frozen ``dataclass`` instances. Monetary fields are ``float``;
per-transaction values keep full precision while aggregate records
(:class:`DailyBucket`, :class:`CumulativePoint`, :class:`DailyClose`,
:class:`Totals`) are rounded to 2 decimals when they are built.

Timestamps are timezone-aware ``datetime`` objects expressed in the configured
institutional zone; calendar days are ``datetime.date``. Conversion to the JSON
wire shape lives in :mod:`statement_ledger.payload`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any, TypeAlias

# One spreadsheet line below the header row: header text -> raw cell value.
# Cell values may be native ``date``/``datetime``/``time`` objects, numbers or
# strings depending on the reader and the source cell type.
RawRow: TypeAlias = Mapping[str, Any]


class Direction(StrEnum):
    CREDIT = "credit"
    DEBIT = "debit"


@dataclass(frozen=True, slots=True)
class Transaction:
    """One canonical statement line.

    ``amount`` is signed (positive = inflow) and always equals
    ``credit - debit``. ``row`` is the zero-based position of the source row in
    the statement and breaks ties between transactions sharing a timestamp.
    """

    ts: datetime
    date: date
    description: str
    amount: float
    credit: float
    debit: float
    direction: Direction
    row: int = 0


@dataclass(frozen=True, slots=True)
class Period:
    """Inclusive calendar-day range covered by a statement.

    Both bounds are ``None`` when no transaction survived normalization.
    """

    start: date | None = None
    end: date | None = None

    @property
    def is_empty(self) -> bool:
        return self.start is None or self.end is None


@dataclass(frozen=True, slots=True)
class DailyBucket:
    date: date
    credit: float
    debit: float
    net: float

    @property
    def amount(self) -> float:
        # Older consumers read daily "spending" from ``amount``.
        return self.debit


@dataclass(frozen=True, slots=True)
class CumulativePoint:
    ts: datetime
    cumulative: float


@dataclass(frozen=True, slots=True)
class DailyClose:
    date: date
    cumulative_close: float


@dataclass(frozen=True, slots=True)
class Totals:
    credits: float = 0.0
    debits: float = 0.0
    net: float = 0.0

    @property
    def expenses(self) -> float:
        return self.debits

    @property
    def spending(self) -> float:
        return self.debits


@dataclass(frozen=True, slots=True)
class StatementResult:
    """Everything derived from one statement in a single pipeline run.

    ``rows_read`` counts the raw rows handed to the pipeline and
    ``rows_skipped`` those that did not become a transaction (unresolvable
    date, no money movement, or outside an explicit period window).
    ``elapsed_ms`` is the wall time spent inside the pipeline.
    """

    transactions: list[Transaction]
    period: Period
    daily_buckets: list[DailyBucket]
    timeline: list[CumulativePoint]
    daily_closes: list[DailyClose]
    totals: Totals
    rows_read: int = 0
    rows_skipped: int = 0
    elapsed_ms: float = 0.0


__all__ = [
    "CumulativePoint",
    "DailyBucket",
    "DailyClose",
    "Direction",
    "Period",
    "RawRow",
    "StatementResult",
    "Totals",
    "Transaction",
]
