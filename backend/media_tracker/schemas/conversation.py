"""Chat messages exchanged with the language model during one query."""
import enum
from typing import Any

from pydantic import BaseModel, Field


class Role(str, enum.Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""
    id: str
    name: str
    arguments: str = "{}"  # JSON-encoded

    def to_openai(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class ChatMessage(BaseModel):
    """One entry of the conversation history."""
    role: Role
    content: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_call_id: str | None = None
    name: str | None = None

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=Role.USER, content=content)

    @classmethod
    def tool_result(cls, call: ToolCall, content: str) -> "ChatMessage":
        return cls(role=Role.TOOL, content=content, tool_call_id=call.id, name=call.name)

    def to_openai(self) -> dict[str, Any]:
        """Serialize to the chat completions wire format."""
        message: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        if self.tool_call_id:
            message["tool_call_id"] = self.tool_call_id
        if self.name and self.role == Role.TOOL:
            message["name"] = self.name
        return message
