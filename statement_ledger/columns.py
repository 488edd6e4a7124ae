"""Header synonym resolution for bank statement rows.

Exports from different banks (and different export versions from the same
bank) name the same column differently and disagree on case and padding. A
``ColumnSpec`` lists, per semantic field, the candidate header names in
priority order; :func:`resolve_column` returns the cell under the first
candidate present in the row.

The resolver carries no sign semantics. Which of the generic "Debit"/"Credit"
headers means inflow is decided by the bank profile that supplies the
``incomeAmount``/``expenseAmount`` lists (see :mod:`statement_ledger.profiles`).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

ColumnSpec: TypeAlias = Mapping[str, Sequence[str]]

DATE = "date"
TIME = "time"
DESCRIPTION = "description"
INCOME_AMOUNT = "incomeAmount"
EXPENSE_AMOUNT = "expenseAmount"

# Shared synonym lists for the columns whose meaning does not vary by bank.
DEFAULT_COLUMNS: dict[str, tuple[str, ...]] = {
    DATE: (
        "Дата",
        "Дата операции",
        "Operation date",
        "Posting date",
        "Дата проводки",
        "Date",
    ),
    TIME: (
        "Время",
        "Время операции",
        "Operation time",
        "Time",
    ),
    DESCRIPTION: (
        # MBank
        "Operation",
        "Recipient/Payer",
        "Описание",
        "Описание операции",
        "Description",
        "Назначение платежа",
        "Назначение",
    ),
}


def _header_key(header: Any) -> str:
    return str(header).strip().casefold()


def resolve_column(row: Mapping[str, Any], candidates: Sequence[str]) -> Any | None:
    """Return the cell under the first candidate header present in ``row``.

    Headers and candidates are compared case-insensitively with surrounding
    whitespace ignored. Candidates are tried in order; ``None`` means no
    candidate matched. A matching header wins even when its cell is empty.
    """

    by_key: dict[str, Any] = {}
    for header in row:
        # First occurrence wins when two headers normalize to the same key.
        by_key.setdefault(_header_key(header), header)
    for candidate in candidates:
        header = by_key.get(_header_key(candidate))
        if header is not None:
            return row[header]
    return None


__all__ = [
    "DATE",
    "DEFAULT_COLUMNS",
    "DESCRIPTION",
    "EXPENSE_AMOUNT",
    "INCOME_AMOUNT",
    "TIME",
    "ColumnSpec",
    "resolve_column",
]
