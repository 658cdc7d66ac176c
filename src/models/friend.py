"""
Core Data Models for Friends Ledger

A friend record is the only entity in the system. Its balance is signed
from the user's point of view:

- positive: the friend owes the user
- negative: the user owes the friend
- zero: the two are even

DESIGN DECISION: Friend ids are either the integers of the demo data or
the strings produced by the id generator. Both are valid, so the id type
is a union and lookups compare by equality only.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


FriendId = Union[int, str]
Amount = Union[int, float]

NAME_MAX_LENGTH = 100


class PayingParty(str, Enum):
    """Who paid the bill being split."""
    USER = "user"
    FRIEND = "friend"


class BalanceStatus(str, Enum):
    """Which way a balance points."""
    OWE = "owe"      # user owes the friend
    OWED = "owed"    # friend owes the user
    EVEN = "even"


class Friend(BaseModel):
    """
    A friend and the running balance with them.

    Created with a zero balance. Only settlement changes the balance
    afterwards; friends are never deleted.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: FriendId = Field(
        ...,
        description="Unique friend identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Display name"
    )
    image: str = Field(
        ...,
        min_length=1,
        description="Avatar image URL"
    )
    balance: Amount = Field(
        default=0,
        description="Signed balance (positive means the friend owes you)"
    )

    @field_validator('balance', mode='before')
    @classmethod
    def reject_bool_balance(cls, v: Amount) -> Amount:
        """bool is an int subclass; a True balance is always a bug."""
        if isinstance(v, bool):
            raise ValueError("Balance must be a number, not a boolean")
        return v

    @property
    def status(self) -> BalanceStatus:
        if self.balance < 0:
            return BalanceStatus.OWE
        if self.balance > 0:
            return BalanceStatus.OWED
        return BalanceStatus.EVEN

    def balance_message(self, currency: str = "$") -> str:
        """Human-friendly one-liner shown under the friend's name."""
        amount = format_amount(abs(self.balance))
        if self.status == BalanceStatus.OWE:
            return f"You owe {self.name} {currency}{amount}"
        if self.status == BalanceStatus.OWED:
            return f"{self.name} owes you {currency}{amount}"
        return f"You and {self.name} are even"


def format_amount(value: Amount) -> str:
    """Drop the decimal part of whole amounts (20.0 -> '20', 2.5 -> '2.5')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def avatar_url_for(base_url: str, friend_id: FriendId) -> str:
    """Avatar derived purely from the friend id."""
    return f"{base_url}?u={friend_id}"


# Demo friends every new session starts with
INITIAL_FRIENDS: list[dict] = [
    {
        "id": 118836,
        "name": "Clark",
        "image": "https://i.pravatar.cc/48?u=118836",
        "balance": -7,
    },
    {
        "id": 933372,
        "name": "Sarah",
        "image": "https://i.pravatar.cc/48?u=933372",
        "balance": 20,
    },
    {
        "id": 499476,
        "name": "Anthony",
        "image": "https://i.pravatar.cc/48?u=499476",
        "balance": 0,
    },
]


def initial_friends() -> list[Friend]:
    """Fresh copies of the demo friends."""
    return [Friend(**data) for data in INITIAL_FRIENDS]
