"""Parsing of money amounts typed on the command line."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a typed amount such as "-120", "$1,234.56" or "(55.00)".

    Currency symbols and thousands separators are ignored and an amount in
    parentheses is negative. NaN and infinities are rejected.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_balance(balance_str: str) -> tuple[str, Decimal]:
    """Parse an "ACCOUNT=AMOUNT" pair, e.g. "Cheque=2500.00".

    The account name may itself contain '='; the last one separates the amount.

    Raises:
        ValueError: If the pair is malformed or the amount cannot be parsed
    """
    name, sep, amount = balance_str.rpartition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected ACCOUNT=AMOUNT, got '{balance_str}'")
    return name.strip(), parse_amount(amount)
