"""
Ledger Package

The aggregate (Ledger), entry id generation and the snapshot
contract used to persist and restore a ledger.
"""

from budget_ledger.ledger.budget import Ledger
from budget_ledger.ledger.identifiers import generate_id
from budget_ledger.ledger.snapshot import SnapshotError, deserialize, serialize

__all__ = [
    "Ledger",
    "SnapshotError",
    "deserialize",
    "generate_id",
    "serialize",
]
