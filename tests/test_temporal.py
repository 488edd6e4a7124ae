from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from statement_ledger.temporal import (
    end_of_day,
    format_instant,
    normalize_time_cell,
    placeholder_time,
    reconstruct_instant,
)


def _iso(value, time_value=None, row_index=0, *, zone):
    ts = reconstruct_instant(value, time_value, row_index, zone)
    return None if ts is None else format_instant(ts)


# ---------------------------------------------------------------------------
# Time cells
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (0.5, "12:00:00"),
        (0.0, "00:00:00"),
        (0.75, "18:00:00"),
        # 10:30:15 as a day fraction, rounded to the nearest second
        ((10 * 3600 + 30 * 60 + 15) / 86400, "10:30:15"),
        ("9:05", "09:05:00"),
        ("09:05:07", "09:05:07"),
        (" 23:59 ", "23:59:00"),
        (time(7, 8, 9), "07:08:09"),
        (datetime(2025, 1, 1, 14, 15, 16), "14:15:16"),
    ],
)
def test_normalize_time_cell(raw, expected):
    assert normalize_time_cell(raw) == expected


@pytest.mark.parametrize(
    "raw", [None, "", "noon", "25:00", "12:60", "9.05", -0.1, True, date(2025, 1, 1)]
)
def test_normalize_time_cell_absent(raw):
    assert normalize_time_cell(raw) is None


# ---------------------------------------------------------------------------
# Numeric serials
# ---------------------------------------------------------------------------


def test_serial_without_time_is_midnight_in_zone(zone):
    assert _iso(45000, zone=zone) == "2023-03-15T00:00:00.000+06:00"


def test_serial_fraction_is_time_of_day(zone):
    assert _iso(45000.5, zone=zone) == "2023-03-15T12:00:00.000+06:00"


def test_serial_time_cell_overrides_fraction(zone):
    assert _iso(45000.5, "08:30", zone=zone) == "2023-03-15T08:30:00.000+06:00"


def test_serial_string_inside_window(zone):
    assert _iso("45658", zone=zone) == "2025-01-01T00:00:00.000+06:00"


def test_bare_number_string_outside_window_is_unresolved(zone):
    assert _iso("12", zone=zone) is None
    assert _iso("20250101", zone=zone) is None


# ---------------------------------------------------------------------------
# Native values
# ---------------------------------------------------------------------------


def test_native_datetime_is_read_in_zone(zone):
    assert _iso(datetime(2025, 1, 2, 13, 45), zone=zone) == "2025-01-02T13:45:00.000+06:00"


def test_native_midnight_takes_time_cell(zone):
    assert _iso(datetime(2025, 1, 2), "9:15", zone=zone) == "2025-01-02T09:15:00.000+06:00"


def test_native_non_midnight_ignores_time_cell(zone):
    assert _iso(datetime(2025, 1, 2, 13, 45), "9:15", zone=zone) == "2025-01-02T13:45:00.000+06:00"


def test_native_midnight_without_time_cell_stays_midnight(zone):
    assert _iso(datetime(2025, 1, 2), "", zone=zone) == "2025-01-02T00:00:00.000+06:00"


def test_aware_datetime_is_converted_to_zone(zone):
    utc = datetime(2025, 1, 1, 20, 0, tzinfo=timezone.utc)
    assert _iso(utc, zone=zone) == "2025-01-02T02:00:00.000+06:00"


def test_native_date(zone):
    assert _iso(date(2025, 3, 8), "10:00", zone=zone) == "2025-03-08T10:00:00.000+06:00"
    assert _iso(date(2025, 3, 8), zone=zone) == "2025-03-08T00:00:00.000+06:00"


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("01.02.2025 10:30", "2025-02-01T10:30:00.000+06:00"),
        ("01.02.2025 10:30:45", "2025-02-01T10:30:45.000+06:00"),
        ("1.2.2025 7:05", "2025-02-01T07:05:00.000+06:00"),
        ("01.02.202510:30", "2025-02-01T10:30:00.000+06:00"),
        ("2025-02-01 10:30", "2025-02-01T10:30:00.000+06:00"),
        ("2025-02-01T10:30:45", "2025-02-01T10:30:45.000+06:00"),
        ("2025-02-01T10:30:45Z", "2025-02-01T16:30:45.000+06:00"),
    ],
)
def test_combined_date_time_strings(raw, expected, zone):
    assert _iso(raw, zone=zone) == expected


def test_date_only_string_uses_time_cell(zone):
    assert _iso("15.03.2025", "18:20", zone=zone) == "2025-03-15T18:20:00.000+06:00"
    assert _iso("2025-03-15", 0.25, zone=zone) == "2025-03-15T06:00:00.000+06:00"


@pytest.mark.parametrize(("row_index", "hour"), [(0, 9), (1, 10), (8, 17), (9, 9), (13, 13)])
def test_date_only_string_gets_placeholder_time(row_index, hour, zone):
    ts = reconstruct_instant("15.03.2025", None, row_index, zone)
    assert ts is not None
    assert (ts.hour, ts.minute, ts.second) == (hour, 0, 0)
    assert placeholder_time(row_index) == time(hour)


def test_placeholder_is_reproducible(zone):
    first = reconstruct_instant("2025-03-15", "", 4, zone)
    second = reconstruct_instant("2025-03-15", "", 4, zone)
    assert first == second


def test_freeform_fallback(zone):
    assert _iso("March 5, 2025", zone=zone) == "2025-03-05T00:00:00.000+06:00"


def test_freeform_keeps_time_of_day(zone):
    assert _iso("5 March 2025 14:10", zone=zone) == "2025-03-05T14:10:00.000+06:00"


@pytest.mark.parametrize("raw", ["12:30", "May", "5 March", "March 2025", "2025"])
def test_freeform_without_full_date_is_unresolved(raw, zone):
    assert reconstruct_instant(raw, None, 0, zone) is None


@pytest.mark.parametrize(
    "raw", ["", "   ", "Итого", "garbage text", "31.02.2025x", None, True, [1]]
)
def test_unresolvable_values(raw, zone):
    assert reconstruct_instant(raw, None, 0, zone) is None


def test_end_of_day(zone):
    eod = end_of_day(date(2025, 1, 1), zone)
    assert format_instant(eod) == "2025-01-01T23:59:59.999+06:00"
