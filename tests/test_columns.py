from __future__ import annotations

from statement_ledger.columns import DATE, DEFAULT_COLUMNS, DESCRIPTION, resolve_column


def test_resolve_column_is_case_and_whitespace_insensitive():
    row = {"  дата операции ": "01.01.2025", "DESCRIPTION": "Coffee"}
    assert resolve_column(row, DEFAULT_COLUMNS[DATE]) == "01.01.2025"
    assert resolve_column(row, DEFAULT_COLUMNS[DESCRIPTION]) == "Coffee"


def test_resolve_column_follows_candidate_priority_not_row_order():
    row = {"Date": "2025-01-02", "Дата": "01.01.2025"}
    # "Дата" is listed before "Date"
    assert resolve_column(row, DEFAULT_COLUMNS[DATE]) == "01.01.2025"


def test_resolve_column_returns_empty_cell_of_first_match():
    row = {"Operation": "", "Description": "fallback"}
    assert resolve_column(row, DEFAULT_COLUMNS[DESCRIPTION]) == ""


def test_resolve_column_absent():
    assert resolve_column({"Amount": "10"}, ["Debit", "Credit"]) is None
    assert resolve_column({}, ["Debit"]) is None
