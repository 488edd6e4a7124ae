"""JSON wire shape for a normalized statement.

The payload mirrors what downstream consumers (charts, budgeting views)
expect: camelCase keys, ISO dates, instants with millisecond precision and
UTC offset, and monetary values rounded to 2 decimals. ``dailyBuckets[].amount``
and ``totals.expenses``/``totals.spending`` duplicate the debit figures under
the names older consumers read.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import StatementResult
from .profiles import BankProfile
from .temporal import format_instant


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TransactionOut(_Wire):
    ts: str
    date: str
    description: str
    amount: float
    credit: float
    debit: float
    direction: str


class PeriodOut(_Wire):
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class DailyBucketOut(_Wire):
    date: str
    credit: float
    debit: float
    net: float
    amount: float


class CumulativePointOut(_Wire):
    ts: str
    cumulative: float


class DailyCloseOut(_Wire):
    date: str
    cumulative_close: float


class TotalsOut(_Wire):
    credits: float
    debits: float
    net: float
    expenses: float
    spending: float


class FileMeta(_Wire):
    name: str
    size: int


class MetaOut(_Wire):
    processed_at: str
    file: FileMeta | None = None
    sheet: str | None = None
    profile: str
    rows: int
    transactions: int
    skipped_rows: int
    parse_ms: float


class AccountOut(_Wire):
    currency: str
    bank: str


class StatementPayload(_Wire):
    meta: MetaOut
    account: AccountOut
    period: PeriodOut
    daily_buckets: list[DailyBucketOut]
    timeline: list[CumulativePointOut]
    daily_closes: list[DailyCloseOut]
    transactions: list[TransactionOut]
    totals: TotalsOut


def build_payload(
    result: StatementResult,
    *,
    profile: BankProfile,
    processed_at: datetime,
    file: FileMeta | None = None,
    sheet: str | None = None,
) -> StatementPayload:
    period = result.period
    return StatementPayload(
        meta=MetaOut(
            processed_at=format_instant(processed_at),
            file=file,
            sheet=sheet,
            profile=profile.name,
            rows=result.rows_read,
            transactions=len(result.transactions),
            skipped_rows=result.rows_skipped,
            parse_ms=round(result.elapsed_ms, 3),
        ),
        account=AccountOut(currency=profile.currency, bank=profile.bank),
        period=PeriodOut(
            from_=period.start.isoformat() if period.start else None,
            to=period.end.isoformat() if period.end else None,
        ),
        daily_buckets=[
            DailyBucketOut(
                date=b.date.isoformat(),
                credit=b.credit,
                debit=b.debit,
                net=b.net,
                amount=b.amount,
            )
            for b in result.daily_buckets
        ],
        timeline=[
            CumulativePointOut(ts=format_instant(p.ts), cumulative=p.cumulative)
            for p in result.timeline
        ],
        daily_closes=[
            DailyCloseOut(date=c.date.isoformat(), cumulative_close=c.cumulative_close)
            for c in result.daily_closes
        ],
        transactions=[
            TransactionOut(
                ts=format_instant(t.ts),
                date=t.date.isoformat(),
                description=t.description,
                amount=t.amount,
                credit=t.credit,
                debit=t.debit,
                direction=str(t.direction),
            )
            for t in result.transactions
        ],
        totals=TotalsOut(
            credits=result.totals.credits,
            debits=result.totals.debits,
            net=result.totals.net,
            expenses=result.totals.expenses,
            spending=result.totals.spending,
        ),
    )


def payload_dict(payload: StatementPayload) -> dict[str, Any]:
    """JSON-ready ``dict`` with camelCase keys."""

    return payload.model_dump(mode="json", by_alias=True)


__all__ = ["FileMeta", "StatementPayload", "build_payload", "payload_dict"]
