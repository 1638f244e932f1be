"""
src/orchestrator/models.py

Pydantic models for a chat turn: inbound request, tool-calling I/O and the two response shapes.
Field names go over the wire in camelCase (autoMode, toolsUsed, ...).
"""


from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(WireModel):

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ToolCall(BaseModel):

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):

    tool: str
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PendingAction(WireModel):
    """A tool call blocked on approval. The caller echoes it back verbatim to approve it."""

    tool_name: str
    tool_arguments: Dict[str, Any] = Field(default_factory=dict)
    action_description: Optional[str] = None


class TurnRequest(WireModel):

    message: str = ""
    auto_mode: bool = False
    history: List[ChatMessage] = Field(default_factory=list)
    approved_action: Optional[PendingAction] = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, v):
        return "" if v is None else v

    @model_validator(mode="after")
    def _needs_message_or_action(self) -> "TurnRequest":
        if not self.message.strip() and self.approved_action is None:
            raise ValueError("message is required unless an approvedAction is supplied")
        return self


class TurnResponse(WireModel):
    """Normal answer, rule-based answer or error text."""

    content: str
    tools_used: List[str] = Field(default_factory=list)
    data: Any = None


class ApprovalRequired(PendingAction):
    """Turn halted before a tool that needs explicit confirmation."""

    requires_approval: Literal[True] = True
