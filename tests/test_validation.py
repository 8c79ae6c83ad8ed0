"""Tests for amount parsing and entry validation rules."""

import pytest
from decimal import Decimal

from budget_ledger.validation import (
    NOT_A_NUMBER,
    EmptyDescriptionError,
    InvalidAmountError,
    LedgerValidationError,
    is_not_a_number,
    parse_amount,
    validate_amount,
    validate_description,
)


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("raw, expected", [
        ("2000", Decimal("2000")),
        ("  12.50 ", Decimal("12.50")),
        ("-5", Decimal("-5")),
        ("1e3", Decimal("1e3")),
        (42, Decimal("42")),
        (0.1, Decimal("0.1")),
        (Decimal("7.25"), Decimal("7.25")),
    ])
    def test_numeric_input(self, raw, expected):
        """Test that numeric input is converted."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        "",
        "   ",
        "abc",
        "12abc",
        "NaN",
        "Infinity",
        "-inf",
        float("nan"),
        float("inf"),
        Decimal("Infinity"),
        None,
        True,
        [],
        {},
    ])
    def test_not_a_number(self, raw):
        """Test that anything non-finite becomes the sentinel."""
        assert is_not_a_number(parse_amount(raw))

    @pytest.mark.parametrize("raw", ["1e400", "-1e400", Decimal("1e400"), 10 ** 400])
    def test_overflowing_double_range_is_not_a_number(self, raw):
        """Values too large to store as a double become the sentinel."""
        assert is_not_a_number(parse_amount(raw))

    def test_rounds_to_double_precision(self):
        """Extra digits beyond a double are rounded away at parse time."""
        assert parse_amount("1234567890.123456789") == Decimal("1234567890.1234567")
        assert parse_amount(Decimal("0.1000000000000000000001")) == Decimal("0.1")

    def test_underflow_parses_to_zero(self):
        assert parse_amount("1e-400") == 0

    def test_sentinel_is_nan(self):
        assert NOT_A_NUMBER.is_nan()

    def test_never_raises_on_odd_input(self):
        """The parser never raises."""
        assert is_not_a_number(parse_amount(object()))


class TestValidateDescription:
    """Tests for validate_description."""

    def test_trims(self):
        assert validate_description("  Paycheck  ") == "Paycheck"

    @pytest.mark.parametrize("description", ["", "   ", "\t\n", None, 12])
    def test_rejects_blank(self, description):
        with pytest.raises(EmptyDescriptionError):
            validate_description(description)

    def test_error_message_uses_label(self):
        with pytest.raises(EmptyDescriptionError, match="Income description cannot be empty."):
            validate_description("", "Income")


class TestValidateAmount:
    """Tests for validate_amount."""

    @pytest.mark.parametrize("amount", [Decimal("0.01"), 1, 2000, 12.5])
    def test_accepts_positive(self, amount):
        assert validate_amount(amount) > 0

    @pytest.mark.parametrize("amount", [
        0,
        -5,
        Decimal("0"),
        Decimal("-0.01"),
        float("nan"),
        float("inf"),
        NOT_A_NUMBER,
        Decimal("-Infinity"),
        "10",
        None,
        True,
    ])
    def test_rejects_invalid(self, amount):
        with pytest.raises(InvalidAmountError):
            validate_amount(amount)

    @pytest.mark.parametrize("amount", [Decimal("1e400"), 10 ** 400])
    def test_rejects_amounts_beyond_double_range(self, amount):
        with pytest.raises(InvalidAmountError):
            validate_amount(amount)

    def test_error_carries_field(self):
        with pytest.raises(LedgerValidationError) as excinfo:
            validate_amount(0, "Expense")
        assert excinfo.value.field == "amount"
        assert excinfo.value.message == "Expense amount must be a positive number."

    def test_errors_are_value_errors(self):
        """Validation errors can be caught as ValueError."""
        assert issubclass(EmptyDescriptionError, ValueError)
        assert issubclass(InvalidAmountError, ValueError)
