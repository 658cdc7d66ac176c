"""
Main Orchestrator for Friends Ledger

This module ties together the session state and defines the
transitions driven by:
1. The UI (toggle forms, select a friend, add a friend, split a bill)
2. The assistant (addFriend, splitBill actions)

DESIGN DECISION: Both paths go through FriendsLedger so the product
rules hold no matter who triggers a change:
- The add-friend form and the split-bill form are never open together
- Settling a bill clears the selection
- Every transition is audited

The manual and assistant settlement paths keep opposite sign
conventions (balance += delta vs balance -= amount).
"""

from typing import Optional
from uuid import UUID

import structlog

from src.agents import AssistantBridge, FriendsAssistant, register_ledger_actions
from src.agents.bridge import ActionArgumentError
from src.audit import AuditLogger
from src.config import AppSettings, get_settings
from src.forms import AddFriendForm, SplitBillForm
from src.models.audit import AuditEventBuilder, AuditSource
from src.models.friend import (
    NAME_MAX_LENGTH,
    Amount,
    Friend,
    FriendId,
    avatar_url_for,
    initial_friends,
)
from src.state import FriendDirectory, IdGenerator, Selection, UUIDIdGenerator


logger = structlog.get_logger("friends_ledger.orchestrator")


class FriendsLedger:
    """
    Root state for one session.

    Owns the friend directory, the selection and the visibility of the
    add-friend form.
    """

    def __init__(
        self,
        directory: Optional[FriendDirectory] = None,
        selection: Optional[Selection] = None,
        id_generator: Optional[IdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        avatar_base_url: str = "https://i.pravatar.cc/48",
    ):
        self.directory = directory if directory is not None else FriendDirectory()
        self.selection = selection if selection is not None else Selection()
        self._id_generator = id_generator or UUIDIdGenerator()
        self._audit_logger = audit_logger or AuditLogger()
        self._avatar_base_url = avatar_base_url
        self.show_add_friend = False

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def avatar_base_url(self) -> str:
        return self._avatar_base_url

    @property
    def friends(self) -> list[Friend]:
        return self.directory.friends

    @property
    def selected_friend(self) -> Optional[Friend]:
        if self.selection.current is None:
            return None
        return self.directory.get(self.selection.current)

    # ------------------------------------------------------------------
    # UI transitions
    # ------------------------------------------------------------------

    def toggle_add_friend_form(self) -> bool:
        """Open or close the add-friend form. Opening it drops the selection."""
        self.show_add_friend = not self.show_add_friend
        self._audit_logger.log(
            AuditEventBuilder.add_friend_form_toggled(self.show_add_friend)
        )
        if self.show_add_friend and self.selection.current is not None:
            previous = self.selection.current
            self.selection.clear()
            self._audit_logger.log(
                AuditEventBuilder.selection_cleared(previous, "add friend form opened")
            )
        return self.show_add_friend

    def add_friend(self, friend: Friend) -> Friend:
        """Append a friend built by the form and close the form."""
        self.directory.append(friend)
        self.show_add_friend = False
        self._audit_logger.log(AuditEventBuilder.friend_added(friend.id, friend.name))
        return friend

    def submit_add_friend(self, form: AddFriendForm) -> Optional[Friend]:
        friend = form.submit(self._id_generator)
        if friend is None:
            if form.name_too_long:
                reason = f"name must be at most {NAME_MAX_LENGTH} characters"
            else:
                reason = "name and image are required"
            self._audit_logger.log(AuditEventBuilder.friend_add_rejected(reason))
            return None
        return self.add_friend(friend)

    def select_friend(self, friend_id: FriendId) -> Optional[FriendId]:
        """Toggle the selection on a friend row and close the add-friend form."""
        current = self.selection.toggle(friend_id)
        self.show_add_friend = False
        if current is None:
            self._audit_logger.log(
                AuditEventBuilder.selection_cleared(friend_id, "toggled off")
            )
        else:
            self._audit_logger.log(AuditEventBuilder.friend_selected(friend_id))
        return current

    def split_bill(self, delta: Amount) -> Optional[Friend]:
        """
        Apply a split-bill delta to the selected friend (balance += delta).

        The selection is cleared whether or not the friend was found.
        Returns the updated friend, or None if nothing was selected.
        """
        friend_id = self.selection.current
        if friend_id is None:
            self._audit_logger.log(
                AuditEventBuilder.bill_split_rejected("no friend selected")
            )
            return None

        friend = self.directory.adjust_balance(friend_id, delta)
        if friend is None:
            self._audit_logger.log(AuditEventBuilder.balance_target_missing(friend_id))
        else:
            self._audit_logger.log(
                AuditEventBuilder.bill_split(friend.id, delta, friend.balance)
            )

        self.selection.clear()
        self._audit_logger.log(
            AuditEventBuilder.selection_cleared(friend_id, "bill split")
        )
        return friend

    def submit_split_bill(self, form: SplitBillForm) -> Optional[Friend]:
        delta = form.compute_delta()
        if delta is None:
            self._audit_logger.log(
                AuditEventBuilder.bill_split_rejected("bill and your expense are required")
            )
            return None
        friend = self.split_bill(delta)
        form.reset()
        return friend

    # ------------------------------------------------------------------
    # Assistant transitions
    # ------------------------------------------------------------------

    def assistant_add_friend(
        self,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> Friend:
        """
        Add a friend on the assistant's behalf.

        The avatar comes from the generated id only; a name-based URL
        would produce broken images for names with spaces or symbols.

        Raises:
            ActionArgumentError: Name is empty or longer than NAME_MAX_LENGTH.
                                 Nothing is changed and no id is drawn.
        """
        stripped = name.strip()
        if not stripped:
            raise ActionArgumentError("addFriend", "name must not be empty")
        if len(stripped) > NAME_MAX_LENGTH:
            raise ActionArgumentError(
                "addFriend", f"name must be at most {NAME_MAX_LENGTH} characters"
            )

        friend_id = self._id_generator.next()
        friend = Friend(
            id=friend_id,
            name=stripped,
            image=avatar_url_for(self._avatar_base_url, friend_id),
            balance=0,
        )
        self.directory.append(friend)
        self._audit_logger.log(
            AuditEventBuilder.friend_added(
                friend.id,
                friend.name,
                source=AuditSource.ASSISTANT,
                correlation_id=correlation_id,
            )
        )
        return friend

    def assistant_split_bill(
        self,
        friend_id: FriendId,
        amount: Amount,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[Friend]:
        """
        Record that the user owes `amount` to a friend (balance -= amount).

        Clears the selection only if that friend was selected.
        """
        friend = self.directory.settle(friend_id, amount)
        if friend is None:
            self._audit_logger.log(
                AuditEventBuilder.balance_target_missing(
                    friend_id,
                    source=AuditSource.ASSISTANT,
                    correlation_id=correlation_id,
                )
            )
        else:
            self._audit_logger.log(
                AuditEventBuilder.bill_split(
                    friend.id,
                    -amount,
                    friend.balance,
                    source=AuditSource.ASSISTANT,
                    correlation_id=correlation_id,
                )
            )

        if self.selection.clear_if(friend_id):
            self._audit_logger.log(
                AuditEventBuilder.selection_cleared(
                    friend_id,
                    "assistant split bill",
                    source=AuditSource.ASSISTANT,
                    correlation_id=correlation_id,
                )
            )
        return friend


def create_ledger(
    app_settings: Optional[AppSettings] = None,
    id_generator: Optional[IdGenerator] = None,
) -> FriendsLedger:
    """Build a ledger from settings, seeded with the demo friends if enabled."""
    app_settings = app_settings or get_settings().app
    friends = initial_friends() if app_settings.seed_demo_friends else []
    return FriendsLedger(
        directory=FriendDirectory(friends),
        id_generator=id_generator,
        audit_logger=AuditLogger(history_limit=app_settings.audit_history_limit),
        avatar_base_url=app_settings.avatar_base_url,
    )


def create_app_components(
    use_assistant: bool = True,
    app_settings: Optional[AppSettings] = None,
    id_generator: Optional[IdGenerator] = None,
):
    """
    Factory function to create all application components.

    Args:
        use_assistant: Whether to create the LLM-backed assistant.
                       Set to False for running without a Gemini key.

    Returns:
        (ledger, bridge, assistant) - assistant is None when disabled
        or not configured
    """
    ledger = create_ledger(app_settings=app_settings, id_generator=id_generator)

    bridge = AssistantBridge()
    register_ledger_actions(bridge, ledger)

    assistant = None
    if use_assistant:
        try:
            assistant = FriendsAssistant(bridge, audit_logger=ledger.audit_logger)
        except Exception as e:
            # Assistant not configured - the ledger works without it
            logger.warning("assistant_unavailable", error=str(e))
            assistant = None

    return ledger, bridge, assistant
