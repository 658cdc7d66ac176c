"""Shared fixtures: deterministic ids and a seeded ledger."""

import pytest

from src.agents import AssistantBridge, register_ledger_actions
from src.audit import AuditLogger
from src.models.friend import initial_friends
from src.orchestrator import FriendsLedger
from src.state import FriendDirectory


class SequenceIdGenerator:
    """Predictable ids for tests: 'id-1', 'id-2', ..."""

    def __init__(self, prefix: str = "id"):
        self._prefix = prefix
        self._count = 0

    def next(self) -> str:
        self._count += 1
        return f"{self._prefix}-{self._count}"


@pytest.fixture
def id_generator():
    return SequenceIdGenerator()


@pytest.fixture
def audit_logger():
    return AuditLogger(history_limit=50)


@pytest.fixture
def ledger(id_generator, audit_logger):
    """Ledger seeded with Clark (-7), Sarah (20) and Anthony (0)."""
    return FriendsLedger(
        directory=FriendDirectory(initial_friends()),
        id_generator=id_generator,
        audit_logger=audit_logger,
    )


@pytest.fixture
def bridge(ledger):
    bridge = AssistantBridge()
    register_ledger_actions(bridge, ledger)
    return bridge
