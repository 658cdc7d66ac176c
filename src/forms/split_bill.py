"""
Split-Bill Form

Inputs for splitting one bill with the selected friend:

- bill: the total bill value
- your_expense: the user's share, never more than the bill
- who_is_paying: the user or the friend

The friend's share is always derived as bill - your_expense.

The form produces a signed delta for FriendDirectory.adjust_balance():

- user pays:   delta = friend's share (the friend now owes that)
- friend pays: delta = -your_expense  (the user now owes that)
"""

from typing import Optional

from src.models.friend import Amount, PayingParty


class SplitBillForm:
    """Bill, expense and payer inputs for one split."""

    def __init__(self):
        self.bill: Optional[Amount] = None
        self.your_expense: Optional[Amount] = None
        self.who_is_paying: PayingParty = PayingParty.USER

    def set_bill(self, value: Optional[Amount]) -> None:
        if value is not None and value < 0:
            return
        self.bill = value

    def set_your_expense(self, value: Optional[Amount]) -> bool:
        """
        Update the user's share.

        A value above the current bill (an empty bill counts as 0) is
        ignored and the previous value kept. Returns whether the value
        was accepted.
        """
        if value is not None and (value < 0 or value > (self.bill or 0)):
            return False
        self.your_expense = value
        return True

    def set_who_is_paying(self, party) -> None:
        self.who_is_paying = PayingParty(party)

    @property
    def friend_expense(self) -> Optional[Amount]:
        if not self.bill:
            return None
        return self.bill - (self.your_expense or 0)

    @property
    def is_complete(self) -> bool:
        return bool(self.bill) and self.your_expense is not None

    def compute_delta(self) -> Optional[Amount]:
        """Signed balance change for this split, or None if incomplete."""
        if not self.is_complete:
            return None
        if self.who_is_paying == PayingParty.USER:
            return self.friend_expense
        return -self.your_expense

    def reset(self) -> None:
        self.bill = None
        self.your_expense = None
        self.who_is_paying = PayingParty.USER
