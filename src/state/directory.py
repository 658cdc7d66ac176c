"""
Friend Directory

Ordered, in-memory collection of friends. Insertion order is display
order.

Balance mutations come from two call paths with opposite sign
conventions:

- adjust_balance(): the split-bill form, balance += delta
- settle(): the assistant, where amount is what the user owes,
  balance -= amount

Both are no-ops for an unknown id.
"""

from typing import Iterator, Optional

from src.models.friend import Amount, Friend, FriendId


class FriendDirectory:
    """The friend list for one session."""

    def __init__(self, friends: Optional[list[Friend]] = None):
        self._friends: list[Friend] = list(friends or [])

    def __len__(self) -> int:
        return len(self._friends)

    def __iter__(self) -> Iterator[Friend]:
        return iter(self._friends)

    def __contains__(self, friend_id: object) -> bool:
        return self.get(friend_id) is not None

    @property
    def friends(self) -> list[Friend]:
        return list(self._friends)

    def get(self, friend_id) -> Optional[Friend]:
        """Find a friend by id; None if there is no such friend."""
        for friend in self._friends:
            if friend.id == friend_id:
                return friend
        return None

    def append(self, friend: Friend) -> None:
        """
        Add a friend at the end of the list.

        Uniqueness of ids is left to the id generator; a duplicate id is
        appended as-is.
        """
        self._friends.append(friend)

    def adjust_balance(self, friend_id: FriendId, delta: Amount) -> Optional[Friend]:
        """
        Add delta to a friend's balance.

        Returns the updated friend, or None when the id is unknown.
        """
        friend = self.get(friend_id)
        if friend is None:
            return None
        friend.balance = friend.balance + delta
        return friend

    def settle(self, friend_id: FriendId, amount: Amount) -> Optional[Friend]:
        """
        Record that the user owes a friend `amount` more.

        Returns the updated friend, or None when the id is unknown.
        """
        return self.adjust_balance(friend_id, -amount)

    def snapshot(self) -> list[dict]:
        """All friends as plain dicts, for the assistant's read context."""
        return [friend.model_dump() for friend in self._friends]
