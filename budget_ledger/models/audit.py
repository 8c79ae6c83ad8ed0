"""
Audit Models for Budget Ledger

Every user action on the ledger, and every persistence outcome, is
recorded as an audit event. This provides:
1. Traceability of what was added, rejected and removed
2. Visibility into degraded persistence (storage full, unavailable)
3. Debugging information when rehydration drops bad data

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Ledger mutations
    ENTRY_ADDED = "entry_added"
    ENTRY_REJECTED = "entry_rejected"
    ENTRY_REMOVED = "entry_removed"
    ENTRY_NOT_FOUND = "entry_not_found"

    # Persistence
    LEDGER_PERSISTED = "ledger_persisted"
    PERSIST_FAILED = "persist_failed"
    LEDGER_HYDRATED = "ledger_hydrated"
    HYDRATE_FAILED = "hydrate_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one form submission)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added(entry_id, "income", "12.50")
        event = AuditEventBuilder.persist_failed("QuotaExceededError", "...")
    """

    @staticmethod
    def entry_added(
        entry_id: str,
        kind: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} entry added: {amount}",
            details={
                "kind": kind,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(
        kind: str,
        field: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} entry rejected: invalid {field}",
            details={
                "kind": kind,
                "field": field,
            },
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def entry_removed(
        entry_id: str,
        kind: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REMOVED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} entry removed",
            details={"kind": kind},
            is_user_action=True,
        )

    @staticmethod
    def entry_not_found(
        entry_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_NOT_FOUND,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description="Removal requested for an unknown entry",
            is_user_action=True,
        )

    @staticmethod
    def ledger_persisted(
        key: str,
        income_count: int,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_PERSISTED,
            severity=AuditSeverity.DEBUG,
            entity_type="ledger",
            entity_id=key,
            description=f"Ledger saved with {income_count + expense_count} entries",
            details={
                "incomes": income_count,
                "expenses": expense_count,
            },
        )

    @staticmethod
    def persist_failed(
        key: str,
        error_type: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=key,
            description=f"Persist failed: {error_type}",
            error_message=error_message,
            details={"error_type": error_type},
        )

    @staticmethod
    def ledger_hydrated(
        key: str,
        income_count: int,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_HYDRATED,
            entity_type="ledger",
            entity_id=key,
            description=f"Ledger restored with {income_count + expense_count} entries",
            details={
                "incomes": income_count,
                "expenses": expense_count,
            },
        )

    @staticmethod
    def hydrate_failed(
        key: str,
        error_type: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HYDRATE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=key,
            description=f"Hydrate failed: {error_type}",
            error_message=error_message,
            details={"error_type": error_type},
        )

