"""
Friend id generation.

Ids are produced by an injected generator so tests can predict them.
"""

from typing import Protocol
from uuid import uuid4

from src.models.friend import FriendId


class IdGenerator(Protocol):
    """Anything that hands out unique friend ids."""

    def next(self) -> FriendId:
        ...


class UUIDIdGenerator:
    """Random UUID4 strings, the production generator."""

    def next(self) -> str:
        return str(uuid4())
