"""Read the first sheet of a statement file into raw rows.

Supported containers:

- ``.xlsx``: ``openpyxl`` (date/time cells arrive as native objects);
- ``.xls``: ``xlrd`` (date-typed cells converted to ``datetime``);
- ``.csv``: stdlib :mod:`csv` (every cell is a string).

Real exports put several lines of account metadata above the table, so the
caller names the zero-based index of the header row. Rows above it are
ignored; every non-blank row below it becomes one ``dict`` of header -> cell.
Empty cells are returned as ``""``.
"""

from __future__ import annotations

import csv
import zipfile
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

from ..logging_setup import get_logger

_logger = get_logger("statement_ledger.ingest.tabular")

SUPPORTED_SUFFIXES = (".xlsx", ".xls", ".csv")


class StatementReadError(Exception):
    """The statement file cannot be turned into rows at all."""


@dataclass(frozen=True, slots=True)
class Sheet:
    name: str
    header: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Container readers -> (sheet name, array of arrays)
# ---------------------------------------------------------------------------


def _read_xlsx(path: Path) -> tuple[str, list[list[Any]]]:
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise StatementReadError(f"not a readable .xlsx workbook: {path.name}") from exc
    try:
        if not wb.sheetnames:
            raise StatementReadError(f"workbook has no sheets: {path.name}")
        ws = wb[wb.sheetnames[0]]
        table = [list(r) for r in ws.iter_rows(values_only=True)]
        return ws.title, table
    finally:
        wb.close()


def _read_xls(path: Path) -> tuple[str, list[list[Any]]]:
    import xlrd

    try:
        book = xlrd.open_workbook(str(path))
    except xlrd.XLRDError as exc:
        raise StatementReadError(f"not a readable .xls workbook: {path.name}") from exc
    if book.nsheets == 0:
        raise StatementReadError(f"workbook has no sheets: {path.name}")

    sheet = book.sheet_by_index(0)
    table: list[list[Any]] = []
    for r in range(sheet.nrows):
        out: list[Any] = []
        for cell in sheet.row(r):
            if cell.ctype == xlrd.XL_CELL_DATE:
                try:
                    out.append(xlrd.xldate.xldate_as_datetime(cell.value, book.datemode))
                except (xlrd.xldate.XLDateError, OverflowError):
                    out.append(cell.value)
            elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                out.append(bool(cell.value))
            elif cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
                out.append(None)
            else:
                out.append(cell.value)
        table.append(out)
    return sheet.name, table


def _read_csv(path: Path) -> tuple[str, list[list[Any]]]:
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            table: list[list[Any]] = [list(r) for r in csv.reader(f)]
    except UnicodeDecodeError as exc:
        raise StatementReadError(f"CSV is not UTF-8 encoded: {path.name}") from exc
    except csv.Error as exc:
        raise StatementReadError(f"failed to parse CSV {path.name}: {exc}") from exc
    return path.stem, table


_READERS = {
    ".xlsx": _read_xlsx,
    ".xls": _read_xls,
    ".csv": _read_csv,
}


def _load_table(path: str | PathLike[str], max_bytes: int | None) -> tuple[str, list[list[Any]]]:
    p = Path(path)
    suffix = p.suffix.lower()
    reader = _READERS.get(suffix)
    if reader is None:
        supported = ", ".join(SUPPORTED_SUFFIXES)
        raise StatementReadError(
            f"unsupported statement format {suffix or '(none)'!r}; expected {supported}"
        )
    try:
        size = p.stat().st_size
    except OSError as exc:
        raise StatementReadError(f"cannot access statement file {p}: {exc}") from exc
    if max_bytes is not None and size > max_bytes:
        raise StatementReadError(f"statement file too large: {size} bytes (limit {max_bytes})")
    try:
        return reader(p)
    except OSError as exc:
        raise StatementReadError(f"cannot read statement file {p}: {exc}") from exc


# ---------------------------------------------------------------------------
# Header/row shaping
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _header_names(cells: list[Any]) -> list[str]:
    """Header text per column; blanks become ``__EMPTY`` and repeats get a
    numeric suffix so that every column keeps its own key."""

    bases = ["__EMPTY" if _is_blank(cell) else str(cell).strip() for cell in cells]
    # Literal header text is reserved, so a generated "A_1" never shadows a
    # real "A_1" column.
    reserved = set(bases)
    names: list[str] = []
    used: set[str] = set()
    for base in bases:
        name, n = base, 0
        while name in used or (name != base and name in reserved):
            n += 1
            name = f"{base}_{n}"
        used.add(name)
        names.append(name)
    return names


def _cell(value: Any) -> Any:
    return "" if value is None else value


def read_statement(
    path: str | PathLike[str],
    *,
    header_index: int = 0,
    max_bytes: int | None = None,
) -> Sheet:
    """Read the first sheet of ``path`` using row ``header_index`` as header.

    Raises :class:`StatementReadError` when the file cannot be read; a header
    index past the end of the sheet yields an empty :class:`Sheet`.
    """

    if header_index < 0:
        raise ValueError("header_index must be >= 0")
    name, table = _load_table(path, max_bytes)
    return _shape(name, table, header_index)


def _shape(name: str, table: list[list[Any]], header_index: int) -> Sheet:
    if header_index >= len(table):
        _logger.debug("header row %d beyond %d rows in sheet %r", header_index, len(table), name)
        return Sheet(name=name, header=[], rows=[])

    header = _header_names(table[header_index])
    rows: list[dict[str, Any]] = []
    for raw in table[header_index + 1 :]:
        if all(_is_blank(v) for v in raw):
            continue
        padded = list(raw) + [None] * (len(header) - len(raw))
        rows.append({h: _cell(v) for h, v in zip(header, padded, strict=False)})
    return Sheet(name=name, header=header, rows=rows)


def preview_statement(
    path: str | PathLike[str],
    *,
    header_index: int = 0,
    limit: int = 3,
    max_bytes: int | None = None,
) -> dict[str, Any]:
    """Operator diagnostics: what the header row and first rows look like.

    Not part of the normalization contract; used to find the right
    ``header_index`` for a new export layout.
    """

    if header_index < 0:
        raise ValueError("header_index must be >= 0")
    name, table = _load_table(path, max_bytes)
    sheet = _shape(name, table, header_index)
    header_row = [_cell(v) for v in table[header_index]] if header_index < len(table) else []
    return {
        "firstSheet": sheet.name,
        "headerIndexUsed": header_index,
        "headerRowUsed": header_row,
        "rowsLenFixed": len(sheet.rows),
        "sampleRowFixed": sheet.rows[0] if sheet.rows else None,
        "previewFixed": sheet.rows[:limit],
    }


__all__ = [
    "SUPPORTED_SUFFIXES",
    "Sheet",
    "StatementReadError",
    "preview_statement",
    "read_statement",
]
