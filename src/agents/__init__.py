"""Assistant package."""

from src.agents.actions import (
    FRIENDS_CONTEXT_DESCRIPTION,
    add_friend_action,
    register_ledger_actions,
    split_bill_action,
)
from src.agents.assistant import (
    AssistantDecision,
    AssistantReply,
    FriendsAssistant,
    parse_decision,
)
from src.agents.bridge import (
    ActionArgumentError,
    ActionParameter,
    AssistantAction,
    AssistantBridge,
    AssistantBridgeError,
    DuplicateActionError,
    ReadableContext,
    UnknownActionError,
)

__all__ = [
    # Bridge
    "ActionArgumentError",
    "ActionParameter",
    "AssistantAction",
    "AssistantBridge",
    "AssistantBridgeError",
    "DuplicateActionError",
    "ReadableContext",
    "UnknownActionError",
    # Ledger actions
    "FRIENDS_CONTEXT_DESCRIPTION",
    "add_friend_action",
    "register_ledger_actions",
    "split_bill_action",
    # Agent
    "AssistantDecision",
    "AssistantReply",
    "FriendsAssistant",
    "parse_decision",
]
