"""Selection state: the friend currently targeted by the split-bill form."""

from typing import Optional

from src.models.friend import FriendId


class Selection:
    """Holds at most one friend id."""

    def __init__(self, friend_id: Optional[FriendId] = None):
        self._current: Optional[FriendId] = friend_id

    @property
    def current(self) -> Optional[FriendId]:
        return self._current

    def is_selected(self, friend_id) -> bool:
        return self._current is not None and self._current == friend_id

    def toggle(self, friend_id: FriendId) -> Optional[FriendId]:
        """Select friend_id, or clear if it is already selected."""
        if self.is_selected(friend_id):
            self._current = None
        else:
            self._current = friend_id
        return self._current

    def clear(self) -> None:
        self._current = None

    def clear_if(self, friend_id) -> bool:
        """Clear only when friend_id is the current selection."""
        if self.is_selected(friend_id):
            self._current = None
            return True
        return False
