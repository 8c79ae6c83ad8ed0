"""Entry validation and amount parsing."""

from budget_ledger.validation.validator import (
    NOT_A_NUMBER,
    EmptyDescriptionError,
    InvalidAmountError,
    LedgerValidationError,
    is_not_a_number,
    parse_amount,
    validate_amount,
    validate_description,
)

__all__ = [
    "NOT_A_NUMBER",
    "EmptyDescriptionError",
    "InvalidAmountError",
    "LedgerValidationError",
    "is_not_a_number",
    "parse_amount",
    "validate_amount",
    "validate_description",
]
