"""Assemble canonical transactions from raw statement rows.

Each row goes through the same steps, in source order:

1. reconstruct the instant from the date/time columns (unresolved -> skip);
2. read income and expense magnitudes from the profile's columns, treating
   unparseable and negative values as zero;
3. skip rows with no money movement (both magnitudes zero);
4. emit a :class:`~statement_ledger.models.Transaction` with
   ``amount = income - expense``.

Skipped rows are never reported individually; callers see them only as the
difference between rows read and transactions produced.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import tzinfo
from typing import Any

from .amounts import parse_amount
from .columns import (
    DATE,
    DESCRIPTION,
    EXPENSE_AMOUNT,
    INCOME_AMOUNT,
    TIME,
    ColumnSpec,
    resolve_column,
)
from .logging_setup import get_logger
from .models import Direction, RawRow, Transaction
from .profiles import BankProfile
from .temporal import reconstruct_instant

_logger = get_logger("statement_ledger.assembler")


def _magnitude(value: Any) -> float:
    parsed = parse_amount(value)
    # Columns carry unsigned magnitudes; the profile decides the sign.
    return 0.0 if math.isnan(parsed) else max(parsed, 0.0)


def clean_description(value: Any) -> str:
    """Cell text with doubled backslashes collapsed and whitespace trimmed."""

    if value is None:
        return ""
    return str(value).replace("\\\\", "\\").strip()


def assemble_row(
    row: RawRow,
    row_index: int,
    spec: ColumnSpec,
    zone: tzinfo,
) -> Transaction | None:
    """Build one transaction from ``row`` or return ``None`` to skip it."""

    ts = reconstruct_instant(
        resolve_column(row, spec[DATE]),
        resolve_column(row, spec[TIME]),
        row_index,
        zone,
    )
    if ts is None:
        return None

    income = _magnitude(resolve_column(row, spec[INCOME_AMOUNT]))
    expense = _magnitude(resolve_column(row, spec[EXPENSE_AMOUNT]))
    if income <= 0 and expense <= 0:
        return None

    amount = income - expense
    return Transaction(
        ts=ts,
        date=ts.date(),
        description=clean_description(resolve_column(row, spec[DESCRIPTION])),
        amount=amount,
        credit=income,
        debit=expense,
        direction=Direction.DEBIT if amount < 0 else Direction.CREDIT,
        row=row_index,
    )


def assemble_transactions(
    rows: Iterable[RawRow],
    profile: BankProfile,
    zone: tzinfo,
) -> list[Transaction]:
    """Convert ``rows`` to transactions in source order, skipping unusable rows.

    A malformed row never aborts the run: conversion errors raised while
    handling one row are logged at DEBUG and the row is skipped.
    """

    spec = profile.column_spec()
    out: list[Transaction] = []
    skipped = 0
    for idx, row in enumerate(rows):
        try:
            tx = assemble_row(row, idx, spec, zone)
        except (ValueError, TypeError, OverflowError) as exc:
            _logger.debug("row %d skipped after conversion error: %s", idx, exc)
            tx = None
        if tx is None:
            skipped += 1
            continue
        out.append(tx)

    if skipped:
        _logger.debug(
            "assembled %d transactions, skipped %d rows (profile=%s)",
            len(out),
            skipped,
            profile.name,
        )
    return out


__all__ = ["assemble_row", "assemble_transactions", "clean_description"]
