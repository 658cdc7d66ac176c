"""
Ledger actions exposed to the assistant.

The assistant can read the full friend list and call two actions:

- addFriend(name): add a friend with a zero balance
- splitBill(friendId, amount): the user now owes `amount` to the friend

Both run through FriendsLedger, the same object the UI drives.
"""

from typing import TYPE_CHECKING

from src.agents.bridge import ActionParameter, AssistantAction, AssistantBridge

if TYPE_CHECKING:
    from src.orchestrator import FriendsLedger


FRIENDS_CONTEXT_DESCRIPTION = "Current friends with IDs, names, images and balances"


def add_friend_action(ledger: "FriendsLedger") -> AssistantAction:
    def handler(name: str, correlation_id=None):
        return ledger.assistant_add_friend(name, correlation_id=correlation_id)

    return AssistantAction(
        name="addFriend",
        description="Add a new friend to the list",
        parameters=[
            ActionParameter(
                name="name",
                type="string",
                description="Name of the friend",
                required=True,
            ),
        ],
        handler=handler,
        accepts_correlation_id=True,
    )


def split_bill_action(ledger: "FriendsLedger") -> AssistantAction:
    def handler(friendId, amount, correlation_id=None):
        return ledger.assistant_split_bill(friendId, amount, correlation_id=correlation_id)

    return AssistantAction(
        name="splitBill",
        description="Split a bill with a specific friend",
        parameters=[
            ActionParameter(
                name="friendId",
                type="number",
                description="ID of the friend",
                required=True,
            ),
            ActionParameter(
                name="amount",
                type="number",
                description="Amount to adjust balance (positive means you owe)",
                required=True,
            ),
        ],
        handler=handler,
        accepts_correlation_id=True,
    )


def register_ledger_actions(bridge: AssistantBridge, ledger: "FriendsLedger") -> None:
    """Expose the friend list and both ledger actions on the bridge."""
    bridge.register_readable(
        description=FRIENDS_CONTEXT_DESCRIPTION,
        provider=ledger.directory.snapshot,
    )
    bridge.register_action(add_friend_action(ledger))
    bridge.register_action(split_bill_action(ledger))
