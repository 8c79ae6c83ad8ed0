"""
Core Data Models for Budget Ledger

These models define the shape of every entry held by the ledger.
They are designed to:
1. Carry an explicit kind (income / expense) instead of a class hierarchy
2. Be immutable once created
3. Be serializable for storage and logging

DESIGN DECISION: Entry models do NOT enforce positivity of the amount.
That rule belongs to the Ledger's add operations. Rehydrated entries
are restored as-is, even when the persisted amount is malformed.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


# =============================================================================
# ENUMS
# =============================================================================

class EntryKind(str, Enum):
    """Which side of the ledger an entry contributes to."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# ENTRY MODEL
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One income or expense record.

    Entries are frozen: id, kind and created_at never change after creation.
    Only the Ledger creates entries (through add_income / add_expense or
    through rehydration of a snapshot).
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        description="Opaque identifier, unique within one ledger"
    )
    kind: EntryKind = Field(
        ...,
        description="Income or expense"
    )
    description: str = Field(
        ...,
        description="Trimmed description of the entry"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=True,
        description="Entry amount; positive and finite unless rehydrated from bad data"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the entry was created (UTC)"
    )

    @property
    def is_income(self) -> bool:
        return self.kind is EntryKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is EntryKind.EXPENSE


# =============================================================================
# AGGREGATE MODELS
# =============================================================================

class LedgerSummary(BaseModel):
    """
    Totals computed from a single pass over both entry sequences.

    budget may be negative.
    """
    model_config = ConfigDict(frozen=True)

    income: Decimal = Field(allow_inf_nan=True)
    expenses: Decimal = Field(allow_inf_nan=True)
    budget: Decimal = Field(allow_inf_nan=True)

    @computed_field
    @property
    def is_overspent(self) -> bool:
        """True when expenses exceed income."""
        return self.budget.is_finite() and self.budget < 0
