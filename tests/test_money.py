"""Tests for money helpers"""
from decimal import Decimal

import pytest

from core.services.money import add, format_money, multiply, parse_money, to_decimal, to_float, total


def test_to_decimal():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("25000") == Decimal("25000")
    assert to_decimal("garbage") == Decimal("0")


def test_arithmetic():
    assert add(0.1, 0.2) == Decimal("0.3")
    assert multiply("50000", 2) == Decimal("100000")
    assert total([]) == Decimal("0")
    assert total([10000, "5000", Decimal("2500")]) == Decimal("17500")


def test_to_float():
    assert to_float(Decimal("100000")) == 100000.0


def test_format_money():
    assert format_money(100000) == "100.000₫"
    assert format_money(0) == "0₫"


def test_parse_money():
    assert parse_money("25000") == Decimal("25000")
    assert parse_money(0.1) == Decimal("0.1")
    assert parse_money(0) == Decimal("0")
    assert parse_money(Decimal("5000")) == Decimal("5000")


@pytest.mark.parametrize("value", [None, "abc", "", "NaN", "Infinity", "-1", True, [1]])
def test_parse_money_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_money(value)
