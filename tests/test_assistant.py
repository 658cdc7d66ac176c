"""
Tests for the conversational assistant.

The Gemini model is replaced with mocks; no real API calls are made.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from tenacity import wait_none

from src.agents import (
    ActionParameter,
    AssistantAction,
    AssistantDecision,
    FriendsAssistant,
    parse_decision,
)
from src.agents.assistant import ACTION_FAILED_REPLY, SERVICE_UNAVAILABLE_REPLY
from src.config import GeminiSettings
from src.models.audit import AuditEventType
from src.models.friend import NAME_MAX_LENGTH


def _model_returning(*texts):
    model = MagicMock()
    model.generate_content_async = AsyncMock(
        side_effect=[MagicMock(text=text) for text in texts]
    )
    return model


@pytest.fixture
def make_assistant(bridge, audit_logger):
    def factory(model):
        with patch("src.agents.assistant.genai") as genai:
            genai.GenerativeModel.return_value = model
            assistant = FriendsAssistant(
                bridge,
                settings=GeminiSettings(api_key="test-key"),
                audit_logger=audit_logger,
            )
            genai.configure.assert_called_once_with(api_key="test-key")
        return assistant
    return factory


@pytest.fixture
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(FriendsAssistant._generate.retry, "wait", wait_none())


class TestParseDecision:
    """Tests for JSON extraction from model output."""

    def test_plain_json(self):
        decision = parse_decision('{"action": "addFriend", "arguments": {"name": "Dana"}, "reply": "Added"}')
        assert decision.action == "addFriend"
        assert decision.arguments == {"name": "Dana"}

    def test_json_inside_prose(self):
        text = 'Sure!\n```json\n{"action": null, "arguments": {}, "reply": "Sarah owes you $20"}\n```'
        decision = parse_decision(text)
        assert decision.action is None
        assert decision.reply == "Sarah owes you $20"

    def test_string_null_action(self):
        assert AssistantDecision(action="null").action is None
        assert AssistantDecision(action=" None ").action is None

    @pytest.mark.parametrize("text", ["no json here", "{not json}", '{"arguments": 5}'])
    def test_unparseable(self, text):
        assert parse_decision(text) is None


class TestFriendsAssistant:
    """Tests for FriendsAssistant.respond."""

    def test_prompt_contains_friends_and_actions(self, make_assistant):
        assistant = make_assistant(_model_returning())
        prompt = assistant.build_prompt("Who owes me?")
        assert "Current friends with IDs, names, images and balances" in prompt
        assert '"name": "Sarah"' in prompt
        assert '"name": "splitBill"' in prompt
        assert 'User: "Who owes me?"' in prompt

    def test_prompt_includes_recent_history(self, make_assistant):
        assistant = make_assistant(_model_returning())
        history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
        prompt = assistant.build_prompt("thanks", history)
        assert "user: hi" in prompt
        assert "assistant: hello" in prompt

    def test_split_bill_action(self, make_assistant, ledger):
        response = json.dumps({
            "action": "splitBill",
            "arguments": {"friendId": 933372, "amount": 15},
            "reply": "Recorded that you owe Sarah $15.",
        })
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("I owe Sarah 15"))

        assert reply.action == "splitBill"
        assert reply.action_succeeded is True
        assert ledger.directory.get(933372).balance == 5

    def test_add_friend_action(self, make_assistant, ledger):
        response = '{"action": "addFriend", "arguments": {"name": "Dana"}, "reply": "Added Dana"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("Add Dana"))

        assert reply.reply == "Added Dana"
        dana = ledger.friends[-1]
        assert dana.name == "Dana"
        assert dana.image == "https://i.pravatar.cc/48?u=id-1"

    def test_answer_without_action(self, make_assistant, ledger):
        response = '{"action": null, "arguments": {}, "reply": "Sarah owes you $20"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("What does Sarah owe me?"))

        assert reply.action is None
        assert reply.action_succeeded is None
        assert reply.reply == "Sarah owes you $20"
        assert [f.balance for f in ledger.friends] == [-7, 20, 0]

    def test_plain_text_response_is_the_reply(self, make_assistant):
        assistant = make_assistant(_model_returning("Everyone is fine."))
        reply = asyncio.run(assistant.respond("hello"))
        assert reply.reply == "Everyone is fine."
        assert reply.action is None

    def test_bad_arguments_change_nothing(self, make_assistant, ledger, audit_logger):
        response = '{"action": "splitBill", "arguments": {"friendId": "Sarah", "amount": 15}, "reply": "Done"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("I owe Sarah 15"))

        assert reply.action_succeeded is False
        assert "Nothing was changed" in reply.reply
        assert ledger.directory.get(933372).balance == 20
        types = [e.event_type for e in audit_logger.history]
        assert AuditEventType.ASSISTANT_ACTION_FAILED in types

    def test_unknown_action(self, make_assistant, ledger):
        response = '{"action": "deleteFriend", "arguments": {"friendId": 933372}, "reply": "Deleted"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("Remove Sarah"))

        assert reply.action_succeeded is False
        assert len(ledger.directory) == 3

    def test_events_share_correlation_id(self, make_assistant, audit_logger):
        response = '{"action": "addFriend", "arguments": {"name": "Dana"}, "reply": "Added"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("Add Dana"))

        correlated = [e for e in audit_logger.history if e.correlation_id == reply.correlation_id]
        assert [e.event_type for e in correlated] == [
            AuditEventType.ASSISTANT_ACTION_INVOKED,
            AuditEventType.FRIEND_ADDED,
            AuditEventType.ASSISTANT_REPLY_GENERATED,
        ]

    @pytest.mark.parametrize("name", ["", "a" * (NAME_MAX_LENGTH + 1)])
    def test_add_friend_with_bad_name_changes_nothing(self, make_assistant, ledger, audit_logger, name):
        response = json.dumps({"action": "addFriend", "arguments": {"name": name}, "reply": "Added"})
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("Add my friend"))

        assert reply.action_succeeded is False
        assert "Nothing was changed" in reply.reply
        assert len(ledger.directory) == 3
        types = [e.event_type for e in audit_logger.history]
        assert AuditEventType.ASSISTANT_ACTION_FAILED in types
        assert AuditEventType.FRIEND_ADDED not in types

    def test_handler_failure_is_reported(self, make_assistant, bridge, audit_logger):
        def broken_handler(**kwargs):
            raise RuntimeError("storage unavailable")

        bridge.register_action(AssistantAction(
            name="archiveFriend",
            description="Archive a friend",
            parameters=[ActionParameter(name="friendId", type="number")],
            handler=broken_handler,
        ))
        response = '{"action": "archiveFriend", "arguments": {"friendId": 933372}, "reply": "Archived"}'
        assistant = make_assistant(_model_returning(response))

        reply = asyncio.run(assistant.respond("Archive Sarah"))

        assert reply.action_succeeded is False
        assert reply.reply == ACTION_FAILED_REPLY
        error = next(
            e for e in audit_logger.history
            if e.event_type == AuditEventType.SYSTEM_ERROR
        )
        assert error.error_message == "storage unavailable"
        assert error.details == {"action": "archiveFriend"}
        assert error.correlation_id == reply.correlation_id
        assert audit_logger.history[-1].event_type == AuditEventType.ASSISTANT_REPLY_GENERATED

    def test_service_failure_is_reported(self, make_assistant, ledger, audit_logger, no_retry_wait):
        model = MagicMock()
        model.generate_content_async = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        assistant = make_assistant(model)

        reply = asyncio.run(assistant.respond("Add Dana"))

        assert reply.reply == SERVICE_UNAVAILABLE_REPLY
        assert model.generate_content_async.await_count == 3
        assert len(ledger.directory) == 3
        assert audit_logger.history[-1].event_type == AuditEventType.EXTERNAL_SERVICE_ERROR

    def test_transient_failure_is_retried(self, make_assistant, ledger, no_retry_wait):
        model = MagicMock()
        model.generate_content_async = AsyncMock(side_effect=[
            RuntimeError("temporary"),
            MagicMock(text='{"action": "addFriend", "arguments": {"name": "Dana"}, "reply": "Added"}'),
        ])
        assistant = make_assistant(model)

        reply = asyncio.run(assistant.respond("Add Dana"))

        assert reply.action_succeeded is True
        assert ledger.friends[-1].name == "Dana"
