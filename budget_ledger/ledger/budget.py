"""
The Ledger aggregate.

DESIGN DECISION: The Ledger owns two ordered sequences of entries,
one per kind. It is the ONLY place entries are created (apart from
rehydration) and the only place they are removed.

GUARANTEES:
- Validation runs before any mutation
- Insertion order is preserved and is the display order
- Totals are always recomputed from the current entries, never cached
- Nothing here persists, renders or logs; callers own those concerns
"""

from datetime import datetime, timezone
from decimal import Context, Decimal
from typing import Callable, Iterator, Optional

from budget_ledger.ledger.identifiers import generate_id
from budget_ledger.models.entry import EntryKind, LedgerEntry, LedgerSummary
from budget_ledger.validation import validate_amount, validate_description


IdFactory = Callable[[], str]
Clock = Callable[[], datetime]

_ZERO = Decimal("0")

# Wide enough to add doubles from opposite ends of their range exactly
_EXACT = Context(prec=800)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Ledger:
    """
    Aggregate root holding all income and expense entries.

    A Ledger is constructed and owned by whatever session hosts it
    and is passed explicitly to anything that needs it.
    """

    def __init__(
        self,
        id_factory: IdFactory = generate_id,
        clock: Clock = utc_now,
    ):
        """
        Initialize an empty ledger.

        Args:
            id_factory: Produces ids for new entries.
            clock: Produces the created_at timestamp for new entries.
        """
        self._id_factory = id_factory
        self._clock = clock
        self._incomes: list[LedgerEntry] = []
        self._expenses: list[LedgerEntry] = []

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def incomes(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._incomes)

    @property
    def expenses(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._expenses)

    def entries(self) -> Iterator[LedgerEntry]:
        """Iterate over incomes, then expenses, in insertion order."""
        yield from self._incomes
        yield from self._expenses

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        for entry in self.entries():
            if entry.id == entry_id:
                return entry
        return None

    def __contains__(self, entry_id: object) -> bool:
        return any(entry.id == entry_id for entry in self.entries())

    def __len__(self) -> int:
        return len(self._incomes) + len(self._expenses)

    def __repr__(self) -> str:
        return f"Ledger(incomes={len(self._incomes)}, expenses={len(self._expenses)})"

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, description: str, amount: Decimal) -> LedgerEntry:
        """
        Add an income entry.

        Raises:
            EmptyDescriptionError: description is empty or whitespace
            InvalidAmountError: amount is non-finite or <= 0
        """
        return self._add(EntryKind.INCOME, description, amount)

    def add_expense(self, description: str, amount: Decimal) -> LedgerEntry:
        """
        Add an expense entry.

        Raises:
            EmptyDescriptionError: description is empty or whitespace
            InvalidAmountError: amount is non-finite or <= 0
        """
        return self._add(EntryKind.EXPENSE, description, amount)

    def _add(self, kind: EntryKind, description: str, amount: Decimal) -> LedgerEntry:
        label = kind.value.capitalize()
        clean_description = validate_description(description, label)
        clean_amount = validate_amount(amount, label)

        entry = LedgerEntry(
            id=self._id_factory(),
            kind=kind,
            description=clean_description,
            amount=clean_amount,
            created_at=self._clock(),
        )
        self._sequence(kind).append(entry)
        return entry

    def remove_by_id(self, entry_id: str) -> bool:
        """
        Remove the entry with the given id.

        Incomes are searched before expenses. Returns False when no
        entry matches; absence is not an error.
        """
        for sequence in (self._incomes, self._expenses):
            for index, entry in enumerate(sequence):
                if entry.id == entry_id:
                    del sequence[index]
                    return True
        return False

    def restore(self, entry: LedgerEntry) -> None:
        """
        Append a previously created entry without validation.

        Used by rehydration only. The caller is responsible for id
        uniqueness.
        """
        self._sequence(entry.kind).append(entry)

    def _sequence(self, kind: EntryKind) -> list[LedgerEntry]:
        return self._incomes if kind is EntryKind.INCOME else self._expenses

    def new_id(self) -> str:
        return self._id_factory()

    def now(self) -> datetime:
        return self._clock()

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def total_income(self) -> Decimal:
        return _sum_amounts(self._incomes)

    def total_expenses(self) -> Decimal:
        return _sum_amounts(self._expenses)

    def net_budget(self) -> Decimal:
        return _EXACT.subtract(self.total_income(), self.total_expenses())

    def summary(self) -> LedgerSummary:
        """Income, expenses and budget from one consistent read."""
        income = _sum_amounts(self._incomes)
        expenses = _sum_amounts(self._expenses)
        return LedgerSummary(
            income=income,
            expenses=expenses,
            budget=_EXACT.subtract(income, expenses),
        )


def _sum_amounts(entries: list[LedgerEntry]) -> Decimal:
    total = _ZERO
    for entry in entries:
        total = _EXACT.add(total, entry.amount)
    return total
