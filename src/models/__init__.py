"""
Data Models Package

This package contains all Pydantic models used in Friends Ledger.
"""

from src.models.friend import (
    INITIAL_FRIENDS,
    NAME_MAX_LENGTH,
    Amount,
    BalanceStatus,
    Friend,
    FriendId,
    PayingParty,
    avatar_url_for,
    format_amount,
    initial_friends,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    AuditSource,
)

__all__ = [
    # Friend models
    "INITIAL_FRIENDS",
    "NAME_MAX_LENGTH",
    "Amount",
    "BalanceStatus",
    "Friend",
    "FriendId",
    "PayingParty",
    "avatar_url_for",
    "format_amount",
    "initial_friends",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    "AuditSource",
]
