"""
Assistant Bridge

DESIGN DECISION: The assistant never touches ledger state directly.
It sees two things through this bridge:

1. READABLE CONTEXTS: a description plus a value provider, read fresh
   on every request (the whole friend list, unfiltered)
2. ACTIONS: named handlers with a fixed parameter schema

Arguments are validated against the schema BEFORE a handler runs, so
a bad call from the LLM can never half-apply a change.
"""

from typing import Any, Callable, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


ParameterType = Literal["string", "number", "boolean"]


class AssistantBridgeError(Exception):
    """Base exception for bridge operations."""
    pass


class UnknownActionError(AssistantBridgeError):
    """Raised when an action name is not registered."""

    def __init__(self, name: str):
        self.action_name = name
        super().__init__(f"Unknown assistant action: {name}")


class DuplicateActionError(AssistantBridgeError):
    """Raised when registering an action name twice."""
    pass


class ActionArgumentError(AssistantBridgeError):
    """Raised when action arguments do not match the parameter schema."""

    def __init__(self, action: str, message: str):
        self.action_name = action
        super().__init__(f"{action}: {message}")


class ActionParameter(BaseModel):
    """One parameter of an assistant action."""

    name: str = Field(..., min_length=1)
    type: ParameterType
    description: str = ""
    required: bool = True

    def accepts(self, value: Any) -> bool:
        if self.type == "string":
            return isinstance(value, str)
        if self.type == "number":
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, bool)


class AssistantAction(BaseModel):
    """A callable the assistant may invoke by name."""

    name: str = Field(..., min_length=1)
    description: str
    parameters: list[ActionParameter] = Field(default_factory=list)
    handler: Callable[..., Any]
    # Handler also takes a correlation_id keyword to tag its own audit events
    accepts_correlation_id: bool = False

    def schema_dict(self) -> dict:
        """Parameter schema as shown to the LLM."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                param.model_dump() for param in self.parameters
            ],
        }


class ReadableContext(BaseModel):
    """State the assistant may read."""

    description: str
    provider: Callable[[], Any]

    @property
    def value(self) -> Any:
        return self.provider()


class AssistantBridge:
    """Registry of readable contexts and actions for one session."""

    def __init__(self):
        self._readables: list[ReadableContext] = []
        self._actions: dict[str, AssistantAction] = {}

    @property
    def actions(self) -> list[AssistantAction]:
        return list(self._actions.values())

    def get_action(self, name: str) -> Optional[AssistantAction]:
        return self._actions.get(name)

    def register_readable(
        self,
        description: str,
        provider: Callable[[], Any],
    ) -> ReadableContext:
        readable = ReadableContext(description=description, provider=provider)
        self._readables.append(readable)
        return readable

    def register_action(self, action: AssistantAction) -> None:
        if action.name in self._actions:
            raise DuplicateActionError(f"Action already registered: {action.name}")
        self._actions[action.name] = action

    def read_context(self) -> list[dict]:
        """Current value of every readable, in registration order."""
        return [
            {"description": readable.description, "value": readable.value}
            for readable in self._readables
        ]

    def describe_actions(self) -> list[dict]:
        return [action.schema_dict() for action in self._actions.values()]

    def validate_arguments(self, action: AssistantAction, arguments: dict) -> dict:
        """
        Check arguments against the action's schema.

        Returns only the declared parameters that were supplied.

        Raises:
            ActionArgumentError: Missing required, unexpected, or
                                 wrongly typed argument
        """
        declared = {param.name: param for param in action.parameters}

        unexpected = sorted(set(arguments) - set(declared))
        if unexpected:
            raise ActionArgumentError(
                action.name, f"unexpected argument(s): {', '.join(unexpected)}"
            )

        validated = {}
        for name, param in declared.items():
            if name not in arguments or arguments[name] is None:
                if param.required:
                    raise ActionArgumentError(action.name, f"missing required argument '{name}'")
                continue
            value = arguments[name]
            if not param.accepts(value):
                raise ActionArgumentError(
                    action.name,
                    f"argument '{name}' must be a {param.type}, got {type(value).__name__}",
                )
            validated[name] = value
        return validated

    def invoke(
        self,
        name: str,
        arguments: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Any:
        """
        Run a registered action.

        The correlation id is forwarded only to handlers registered with
        accepts_correlation_id.

        Raises:
            UnknownActionError: No action with that name
            ActionArgumentError: Arguments do not match the schema
        """
        action = self._actions.get(name)
        if action is None:
            raise UnknownActionError(name)
        validated = self.validate_arguments(action, arguments or {})
        if action.accepts_correlation_id:
            return action.handler(**validated, correlation_id=correlation_id)
        return action.handler(**validated)
