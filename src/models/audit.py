"""
Audit Models for Friends Ledger

Every state change in the ledger is recorded as an audit event,
whether it came from the UI or from the assistant.
This provides:
1. A readable activity trail for the user
2. Debugging information when the assistant does something unexpected
3. A way to tell manual settlements apart from assistant ones

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Friend directory
    FRIEND_ADDED = "friend_added"
    FRIEND_ADD_REJECTED = "friend_add_rejected"
    BALANCE_TARGET_MISSING = "balance_target_missing"

    # Selection and forms
    FRIEND_SELECTED = "friend_selected"
    SELECTION_CLEARED = "selection_cleared"
    ADD_FRIEND_FORM_TOGGLED = "add_friend_form_toggled"

    # Settlement
    BILL_SPLIT = "bill_split"
    BILL_SPLIT_REJECTED = "bill_split_rejected"

    # Assistant
    ASSISTANT_ACTION_INVOKED = "assistant_action_invoked"
    ASSISTANT_ACTION_FAILED = "assistant_action_failed"
    ASSISTANT_REPLY_GENERATED = "assistant_reply_generated"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditSource(str, Enum):
    """Where a change came from."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every ledger transition creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
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
    source: AuditSource = Field(
        default=AuditSource.USER,
        description="Who triggered the event"
    )

    # Friend ids can be ints or strings, so they are stored as text
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'friend', 'action')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one assistant turn)"
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

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "source": self.source.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.friend_added(friend_id, name, source)
        event = AuditEventBuilder.bill_split(friend_id, delta, balance, source)
    """

    @staticmethod
    def friend_added(
        friend_id,
        name: str,
        source: AuditSource = AuditSource.USER,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FRIEND_ADDED,
            source=source,
            entity_type="friend",
            entity_id=str(friend_id),
            correlation_id=correlation_id,
            description=f"Friend added: {name}",
            details={"name": name},
        )

    @staticmethod
    def friend_add_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FRIEND_ADD_REJECTED,
            severity=AuditSeverity.DEBUG,
            entity_type="friend",
            description=f"Add friend rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def friend_selected(friend_id) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FRIEND_SELECTED,
            severity=AuditSeverity.DEBUG,
            entity_type="friend",
            entity_id=str(friend_id),
            description=f"Friend selected: {friend_id}",
        )

    @staticmethod
    def selection_cleared(
        friend_id,
        reason: str,
        source: AuditSource = AuditSource.USER,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SELECTION_CLEARED,
            severity=AuditSeverity.DEBUG,
            source=source,
            entity_type="friend",
            entity_id=str(friend_id) if friend_id is not None else None,
            description=f"Selection cleared ({reason})",
            details={"reason": reason},
            correlation_id=correlation_id,
        )

    @staticmethod
    def add_friend_form_toggled(is_open: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADD_FRIEND_FORM_TOGGLED,
            severity=AuditSeverity.DEBUG,
            description=f"Add friend form {'opened' if is_open else 'closed'}",
            details={"is_open": is_open},
        )

    @staticmethod
    def bill_split(
        friend_id,
        delta,
        new_balance,
        source: AuditSource = AuditSource.USER,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_SPLIT,
            source=source,
            entity_type="friend",
            entity_id=str(friend_id),
            correlation_id=correlation_id,
            description=f"Balance with {friend_id} changed by {delta}",
            details={
                "delta": delta,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def bill_split_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_SPLIT_REJECTED,
            severity=AuditSeverity.DEBUG,
            description=f"Split bill rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def balance_target_missing(
        friend_id,
        source: AuditSource = AuditSource.USER,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_TARGET_MISSING,
            severity=AuditSeverity.WARNING,
            source=source,
            entity_type="friend",
            entity_id=str(friend_id),
            correlation_id=correlation_id,
            description=f"No friend with id {friend_id}; balance unchanged",
        )

    @staticmethod
    def assistant_action_invoked(
        action: str,
        arguments: dict,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSISTANT_ACTION_INVOKED,
            source=AuditSource.ASSISTANT,
            entity_type="action",
            entity_id=action,
            correlation_id=correlation_id,
            description=f"Assistant invoked {action}",
            details={"arguments": arguments},
        )

    @staticmethod
    def assistant_action_failed(
        action: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSISTANT_ACTION_FAILED,
            severity=AuditSeverity.WARNING,
            source=AuditSource.ASSISTANT,
            entity_type="action",
            entity_id=action,
            correlation_id=correlation_id,
            description=f"Assistant action {action} failed",
            error_message=error_message,
        )

    @staticmethod
    def assistant_reply_generated(
        action: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSISTANT_REPLY_GENERATED,
            severity=AuditSeverity.DEBUG,
            source=AuditSource.ASSISTANT,
            correlation_id=correlation_id,
            description="Assistant replied" + (f" after {action}" if action else ""),
            details={"action": action},
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            source=AuditSource.SYSTEM,
            correlation_id=correlation_id,
            description=f"External service error: {service}",
            details={"service": service},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            source=AuditSource.SYSTEM,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
