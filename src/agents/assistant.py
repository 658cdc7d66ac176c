"""
Conversational Assistant for Friends Ledger

DESIGN DECISION: The LLM is a TRANSLATOR, not an actor.
It reads the friend list through the bridge and answers with a JSON
decision naming at most one action. The action itself runs through the
bridge, which validates arguments before touching the ledger.

CRITICAL BOUNDARIES:
- CAN: Read every friend and balance
- CAN: Call addFriend / splitBill with schema-checked arguments
- CANNOT: Change balances any other way
- CANNOT: Invent friends or ids that are not in the list

If the model is unreachable or returns garbage, nothing changes and the
user is told so.
"""

import json
from typing import Any, Optional
from uuid import UUID

import google.generativeai as genai
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator
from tenacity import retry, stop_after_attempt, wait_exponential

from src.agents.bridge import AssistantBridge, AssistantBridgeError
from src.audit import AuditLogger, create_correlation_id
from src.config import GeminiSettings, get_settings
from src.models.audit import AuditEventBuilder


SERVICE_UNAVAILABLE_REPLY = (
    "I couldn't reach the assistant service right now. Nothing was changed."
)
ACTION_FAILED_REPLY = "Something went wrong while doing that. Nothing was changed."


class AssistantDecision(BaseModel):
    """What the model wants to do for one user message."""

    action: Optional[str] = Field(
        default=None,
        description="Name of the action to invoke, or null"
    )
    arguments: dict[str, Any] = Field(default_factory=dict)
    reply: str = Field(
        default="",
        description="Message shown to the user"
    )

    @field_validator('action')
    @classmethod
    def normalize_no_action(cls, v: Optional[str]) -> Optional[str]:
        """Models sometimes write null as a string."""
        if v is None or v.strip().lower() in {"", "null", "none"}:
            return None
        return v.strip()


class AssistantReply(BaseModel):
    """Outcome of one assistant turn, as shown in the chat."""

    reply: str
    action: Optional[str] = None
    arguments: dict[str, Any] = Field(default_factory=dict)
    action_succeeded: Optional[bool] = Field(
        default=None,
        description="None when no action was requested"
    )
    correlation_id: Optional[UUID] = None


def parse_decision(text: str) -> Optional[AssistantDecision]:
    """Pull the first JSON object out of a model response."""
    start = text.find("{")
    end = text.rfind("}") + 1
    if start < 0 or end <= start:
        return None
    try:
        data = json.loads(text[start:end])
        return AssistantDecision(**data)
    except (json.JSONDecodeError, TypeError, ValidationError):
        return None


class FriendsAssistant:
    """
    Chat agent for the friends ledger.

    FLOW:
    1. User message + friend list + action schemas -> LLM
    2. LLM -> JSON decision (deterministic parsing)
    3. Decision -> bridge.invoke (schema-checked)
    4. Reply to the user, amended if the action failed
    """

    def __init__(
        self,
        bridge: AssistantBridge,
        settings: Optional[GeminiSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._bridge = bridge
        self._settings = settings or get_settings().gemini
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = structlog.get_logger("friends_ledger.assistant")
        self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )

    def build_prompt(
        self,
        message: str,
        history: Optional[list[dict]] = None,
    ) -> str:
        contexts = "\n\n".join(
            f"{ctx['description']}:\n{json.dumps(ctx['value'], default=str, indent=2)}"
            for ctx in self._bridge.read_context()
        )
        actions = json.dumps(self._bridge.describe_actions(), indent=2)

        conversation = ""
        if history:
            lines = [f"{turn['role']}: {turn['content']}" for turn in history[-6:]]
            conversation = "Recent conversation:\n" + "\n".join(lines) + "\n\n"

        return f"""You are the assistant of a small app that tracks money between the user and their friends.

A positive balance means the friend owes the user. A negative balance means the user owes the friend.

{contexts}

Available actions:
{actions}

{conversation}User: "{message}"

Respond with ONLY a JSON object in this exact format:
{{"action": "actionName or null", "arguments": {{}}, "reply": "short message to the user"}}

Important:
- Use at most one action
- Use only friend IDs that appear in the list above
- If no action is needed, set "action" to null and just answer from the data
- Never invent friends or balances"""

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        return response.text.strip()

    async def respond(
        self,
        message: str,
        history: Optional[list[dict]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AssistantReply:
        """
        Handle one user message.

        Never raises for model or action failures; the reply says what
        went wrong instead.
        """
        correlation_id = correlation_id or create_correlation_id()
        prompt = self.build_prompt(message, history)

        try:
            text = await self._generate(prompt)
        except Exception as e:
            self._audit_logger.log(
                AuditEventBuilder.external_service_error(
                    service="gemini",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            )
            return AssistantReply(
                reply=SERVICE_UNAVAILABLE_REPLY,
                correlation_id=correlation_id,
            )

        decision = parse_decision(text)
        if decision is None:
            # Plain-text answer, no action
            self._logger.info("assistant_unstructured_reply", correlation_id=str(correlation_id))
            decision = AssistantDecision(reply=text)

        reply = AssistantReply(
            reply=decision.reply or "Done.",
            action=decision.action,
            arguments=decision.arguments,
            correlation_id=correlation_id,
        )

        if decision.action:
            reply = self._run_action(decision, reply, correlation_id)

        self._audit_logger.log(
            AuditEventBuilder.assistant_reply_generated(
                action=reply.action,
                correlation_id=correlation_id,
            )
        )
        return reply

    def _run_action(
        self,
        decision: AssistantDecision,
        reply: AssistantReply,
        correlation_id: UUID,
    ) -> AssistantReply:
        self._audit_logger.log(
            AuditEventBuilder.assistant_action_invoked(
                action=decision.action,
                arguments=decision.arguments,
                correlation_id=correlation_id,
            )
        )
        try:
            self._bridge.invoke(
                decision.action,
                decision.arguments,
                correlation_id=correlation_id,
            )
        except AssistantBridgeError as e:
            self._audit_logger.log(
                AuditEventBuilder.assistant_action_failed(
                    action=decision.action,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            )
            return reply.model_copy(update={
                "reply": f"I couldn't do that ({e}). Nothing was changed.",
                "action_succeeded": False,
            })
        except Exception as e:
            # A handler failed outside the schema checks
            self._audit_logger.log(
                AuditEventBuilder.system_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"action": decision.action},
                    correlation_id=correlation_id,
                )
            )
            return reply.model_copy(update={
                "reply": ACTION_FAILED_REPLY,
                "action_succeeded": False,
            })

        return reply.model_copy(update={"action_succeeded": True})
