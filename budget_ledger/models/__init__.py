"""
Data Models Package

This package contains all Pydantic models used in the Budget Ledger.
Entries, summaries and audit events all conform to these schemas.
"""

from budget_ledger.models.entry import (
    EntryKind,
    LedgerEntry,
    LedgerSummary,
)
from budget_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "EntryKind",
    "LedgerEntry",
    "LedgerSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
