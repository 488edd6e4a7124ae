from __future__ import annotations

import math

import pytest

from statement_ledger.amounts import parse_amount, round2


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1 234,56", 1234.56),
        ("1.234,56", 1234.56),
        ("1234.56", 1234.56),
        ("1 234,5", 1234.5),
        ("  500  ", 500.0),
        ("12,3", 12.3),
        ("1.000.000,00", 1_000_000.0),
        ("1,234.56", 1234.56),
        ("-15.00", -15.0),
        (250, 250.0),
        (99.95, 99.95),
    ],
)
def test_parse_amount_conventions(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["abc", "", "   ", "-", "12abc", "1,2,3", None, True, object()])
def test_parse_amount_not_a_number(raw):
    assert math.isnan(parse_amount(raw))


def test_parse_amount_comma_with_three_digits_is_not_decimal():
    # "1,234" reads as a grouped thousand, not 1.234
    assert parse_amount("1,234") == 1234.0


def test_round2_half_up_and_negative_zero():
    assert round2(0.125) == 0.13
    assert round2(2.675) == 2.68
    assert round2(-0.001) == 0.0
    assert math.copysign(1.0, round2(-0.001)) == 1.0
    assert round2(1234.5678) == 1234.57
