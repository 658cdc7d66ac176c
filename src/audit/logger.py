"""
Audit Logger

DESIGN DECISION: Every ledger transition is logged.
This provides:
1. A recent-activity panel in the UI
2. Debugging capability for assistant actions
3. Correlation of the events of one assistant turn

The audit logger:
- Is synchronous, like every ledger transition
- Gracefully handles failures (doesn't crash the app if logging fails)
- Keeps a bounded in-memory history; nothing is persisted
"""

from collections import deque
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditSeverity


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
    2. An in-memory history (for the activity panel)
    """

    def __init__(self, history_limit: int = 200):
        """
        Initialize audit logger.

        Args:
            history_limit: How many recent events to keep in memory.
                          Older events are dropped first.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_limit)
        self._logger = structlog.get_logger("friends_ledger.audit")

    @property
    def history(self) -> list[AuditEvent]:
        """Recorded events, oldest first."""
        return list(self._history)

    def recent(self, limit: int = 10) -> list[AuditEvent]:
        """The newest events, newest first."""
        return list(reversed(self._history))[:limit]

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if local logging failed; the event is still kept
        in history.
        """
        self._history.append(event)

        try:
            log_dict = event.to_log_dict()
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # A broken log handler must never block a ledger update
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

        return True

    def clear(self) -> None:
        self._history.clear()


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of an assistant turn and pass it through
    the action it triggers.
    """
    return uuid4()
