"""
Entry Validation Rules

DESIGN DECISION: Validation happens in two distinct places:

AMOUNT PARSING (lenient):
- Accepts arbitrary external input (form text, JSON values)
- Never raises
- Anything that is not a finite number becomes NOT_A_NUMBER
- Amounts are held to double precision, the range and digits a stored
  snapshot can carry; values that overflow a double become NOT_A_NUMBER

ENTRY VALIDATION (strict):
- Runs inside Ledger.add_income / Ledger.add_expense
- Rejects empty descriptions and non-positive or non-finite amounts
- Runs BEFORE any mutation, so a rejected entry leaves no trace

IMPORTANT: Validation NEVER silently fixes input beyond trimming
surrounding whitespace. It reports the problem for the user to correct.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any


NOT_A_NUMBER = Decimal("NaN")


class LedgerValidationError(ValueError):
    """Base class for rejected ledger input."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class EmptyDescriptionError(LedgerValidationError):
    """Description is missing, empty or only whitespace."""

    def __init__(self, message: str = "Description cannot be empty."):
        super().__init__("description", message)


class InvalidAmountError(LedgerValidationError):
    """Amount is not a finite number greater than zero."""

    def __init__(self, message: str = "Amount must be a positive number."):
        super().__init__("amount", message)


def parse_amount(raw: Any) -> Decimal:
    """
    Convert unvalidated external input into a Decimal amount.

    Returns NOT_A_NUMBER for empty strings, non-numeric text, NaN,
    infinities, booleans, None and unsupported types. Never raises.

    Finite results are rounded to the nearest double, so "1e400" is
    NOT_A_NUMBER and "1234567890.123456789" becomes 1234567890.1234567.
    """
    if isinstance(raw, bool):
        return NOT_A_NUMBER

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = _to_decimal(str(raw))
    elif isinstance(raw, str):
        value = _to_decimal(raw.strip())
    else:
        return NOT_A_NUMBER

    if not value.is_finite():
        return NOT_A_NUMBER
    return _to_double_precision(value)


def _to_decimal(text: str) -> Decimal:
    if not text:
        return NOT_A_NUMBER
    try:
        return Decimal(text)
    except (InvalidOperation, ValueError):
        return NOT_A_NUMBER


def _to_double_precision(value: Decimal) -> Decimal:
    as_float = float(value)
    if not math.isfinite(as_float):
        return NOT_A_NUMBER
    # repr of a float is the shortest text that reads back as the same double
    return Decimal(repr(as_float))


def is_not_a_number(value: Decimal) -> bool:
    """True for the parser's sentinel (or any other NaN Decimal)."""
    return value.is_nan()


def validate_description(description: Any, label: str = "Entry") -> str:
    """
    Return the trimmed description.

    Raises:
        EmptyDescriptionError: if the description is not a non-blank string
    """
    if not isinstance(description, str) or not description.strip():
        raise EmptyDescriptionError(f"{label} description cannot be empty.")
    return description.strip()


def validate_amount(amount: Any, label: str = "Entry") -> Decimal:
    """
    Return the amount as a finite, positive Decimal.

    Numbers are coerced through parse_amount; other types are rejected.

    Raises:
        InvalidAmountError: if the amount is non-finite or <= 0
    """
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int, float)):
        raise InvalidAmountError(f"{label} amount must be a positive number.")

    value = parse_amount(amount)
    # is_finite() first: ordering comparisons on NaN Decimals raise
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError(f"{label} amount must be a positive number.")
    return value
