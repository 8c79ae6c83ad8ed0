"""
Audit Logger

DESIGN DECISION: Every significant action on the ledger is logged.
This provides:
1. Traceability of user actions (added, rejected, removed)
2. A diagnostic side channel for degraded persistence
3. A short in-memory history the UI can show

The audit logger:
- Is synchronous, like everything else in the ledger
- Gracefully handles failures (never crashes the app if logging fails)
- Supports correlation IDs to trace related events
"""

from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from budget_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("budget_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was emitted, False if emitting failed.
        Never raises.
        """
        self._history.append(event)

        try:
            log_dict = event.to_log_dict()
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity is AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity is AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_emit_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

        return True

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def log_entry_added(
        self,
        entry_id: str,
        kind: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful add."""
        self.log(AuditEventBuilder.entry_added(
            entry_id=entry_id,
            kind=kind,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_entry_rejected(
        self,
        kind: str,
        field: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected user input."""
        self.log(AuditEventBuilder.entry_rejected(
            kind=kind,
            field=field,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_entry_removed(
        self,
        entry_id: str,
        kind: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.entry_removed(
            entry_id=entry_id,
            kind=kind,
            correlation_id=correlation_id,
        ))

    def log_entry_not_found(
        self,
        entry_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.entry_not_found(
            entry_id=entry_id,
            correlation_id=correlation_id,
        ))

    def log_persisted(self, key: str, income_count: int, expense_count: int) -> None:
        self.log(AuditEventBuilder.ledger_persisted(key, income_count, expense_count))

    def log_persist_failed(self, key: str, error: BaseException) -> None:
        """Log a storage write failure (suppressed at the boundary)."""
        self.log(AuditEventBuilder.persist_failed(
            key=key,
            error_type=type(error).__name__,
            error_message=str(error),
        ))

    def log_hydrated(self, key: str, income_count: int, expense_count: int) -> None:
        self.log(AuditEventBuilder.ledger_hydrated(key, income_count, expense_count))

    def log_hydrate_failed(self, key: str, error: BaseException) -> None:
        """Log a storage read or decode failure (suppressed at the boundary)."""
        self.log(AuditEventBuilder.hydrate_failed(
            key=key,
            error_type=type(error).__name__,
            error_message=str(error),
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submission).
    """
    return uuid4()
