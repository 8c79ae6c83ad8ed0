"""
Snapshot contract between the Ledger and persistent storage.

The snapshot is the only bit-exact external contract:

    {
      "incomes":  [{"id", "description", "amount", "createdAt"}, ...],
      "expenses": [{"id", "description", "amount", "createdAt"}, ...]
    }

Kind is implied by which array an entry sits in.

REHYDRATION RULES:
- Missing id          -> generate a new one
- Missing/bad createdAt -> current time at rehydration
- amount              -> numeric coercion only, NOT re-validated
- Unknown fields are ignored; absent arrays default to empty

DESIGN DECISION: Rehydrated amounts are trusted local data. A persisted
zero, negative or malformed amount re-enters the ledger as-is (malformed
values become NaN) rather than being dropped or "fixed".
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from budget_ledger.ledger.budget import Clock, IdFactory, Ledger, utc_now
from budget_ledger.ledger.identifiers import generate_id
from budget_ledger.models.entry import EntryKind, LedgerEntry
from budget_ledger.validation import parse_amount


SNAPSHOT_SECTIONS = {
    EntryKind.INCOME: "incomes",
    EntryKind.EXPENSE: "expenses",
}


class SnapshotError(ValueError):
    """The snapshot is not structurally a ledger snapshot."""
    pass


class EntryRecord(BaseModel):
    """
    One persisted entry as read back from storage.

    Every field is lenient: bad values degrade to None (or NaN for the
    amount) instead of failing the whole snapshot.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    description: str = ""
    amount: Decimal = Field(default=Decimal("NaN"), allow_inf_nan=True)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, (dict, list)):
            return None
        text = str(v)
        return text or None

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else str(v).strip()

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return parse_amount(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> Optional[datetime]:
        if v is None or v == "":
            return None
        try:
            parsed = _DATETIME_FIELD.validate_python(v)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            # Must be representable in UTC to be written back out
            return parsed.astimezone(timezone.utc)
        except (ValidationError, TypeError, ValueError, OverflowError):
            return None


_DATETIME_FIELD = TypeAdapter(datetime)


# =============================================================================
# SERIALIZE
# =============================================================================

def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _amount_to_json(amount: Decimal) -> Optional[float]:
    # JSON has no NaN; write null like a browser's JSON encoder would
    if not amount.is_finite():
        return None
    return float(amount)


def entry_to_record(entry: LedgerEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "description": entry.description,
        "amount": _amount_to_json(entry.amount),
        "createdAt": format_timestamp(entry.created_at),
    }


def serialize(ledger: Ledger) -> dict[str, list[dict[str, Any]]]:
    """Produce a plain structural snapshot of both entry sequences."""
    return {
        "incomes": [entry_to_record(entry) for entry in ledger.incomes],
        "expenses": [entry_to_record(entry) for entry in ledger.expenses],
    }


# =============================================================================
# DESERIALIZE
# =============================================================================

def deserialize(
    snapshot: Mapping[str, Any],
    id_factory: IdFactory = generate_id,
    clock: Clock = utc_now,
) -> Ledger:
    """
    Rebuild a Ledger from a snapshot.

    Raises:
        SnapshotError: if the snapshot (or one of its arrays or entries)
            has the wrong structure
    """
    if not isinstance(snapshot, Mapping):
        raise SnapshotError(
            f"Snapshot must be an object, got {type(snapshot).__name__}"
        )

    ledger = Ledger(id_factory=id_factory, clock=clock)
    seen_ids: set[str] = set()

    for kind, section in SNAPSHOT_SECTIONS.items():
        items = snapshot.get(section)
        if items is None:
            continue
        if not isinstance(items, list):
            raise SnapshotError(
                f"'{section}' must be a list, got {type(items).__name__}"
            )
        for position, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise SnapshotError(
                    f"'{section}[{position}]' must be an object, got {type(item).__name__}"
                )
            entry = _rehydrate_entry(ledger, kind, item, seen_ids)
            seen_ids.add(entry.id)
            ledger.restore(entry)

    return ledger


def _rehydrate_entry(
    ledger: Ledger,
    kind: EntryKind,
    item: Mapping[str, Any],
    seen_ids: set[str],
) -> LedgerEntry:
    record = EntryRecord.model_validate(dict(item))

    entry_id = record.id
    if entry_id is None or entry_id in seen_ids:
        entry_id = ledger.new_id()

    return LedgerEntry(
        id=entry_id,
        kind=kind,
        description=record.description,
        amount=record.amount,
        created_at=record.created_at or ledger.now(),
    )
