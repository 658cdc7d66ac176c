"""Session state package."""

from src.state.directory import FriendDirectory
from src.state.identity import IdGenerator, UUIDIdGenerator
from src.state.selection import Selection

__all__ = [
    "FriendDirectory",
    "IdGenerator",
    "Selection",
    "UUIDIdGenerator",
]
