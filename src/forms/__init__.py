"""UI form models."""

from src.forms.add_friend import DEFAULT_AVATAR_URL, AddFriendForm
from src.forms.split_bill import SplitBillForm

__all__ = [
    "DEFAULT_AVATAR_URL",
    "AddFriendForm",
    "SplitBillForm",
]
