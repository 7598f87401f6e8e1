"""Tests for amount and balance parsing."""

import pytest
from decimal import Decimal

from budgetledger.utils.amount_parser import parse_amount, parse_balance


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("-120", Decimal("-120")),
        ("$1,234.56", Decimal("1234.56")),
        ("(55.00)", Decimal("-55.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_balance():
    assert parse_balance("Cheque=2500.00") == ("Cheque", Decimal("2500.00"))


def test_parse_balance_uses_last_separator():
    assert parse_balance("A=B=10") == ("A=B", Decimal("10"))


def test_parse_balance_requires_separator():
    with pytest.raises(ValueError, match="ACCOUNT=AMOUNT"):
        parse_balance("Cheque 2500")


def test_parse_balance_requires_name():
    with pytest.raises(ValueError):
        parse_balance("=100")
