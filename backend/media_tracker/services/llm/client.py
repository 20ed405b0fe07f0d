"""LLM client for OpenAI-compatible chat completion endpoints."""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from media_tracker.schemas.config import AIConfig
from media_tracker.schemas.conversation import ChatMessage, Role, ToolCall

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Hard failure talking to the language model endpoint."""


class CompletionStatus(str, enum.Enum):
    """Outcome classes of one chat completion request."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    TOOLS_UNSUPPORTED = "tools_unsupported"
    FATAL = "fatal"


@dataclass
class CompletionResult:
    """Typed result of a chat completion call; never raised, always returned."""

    status: CompletionStatus
    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    error: Exception | None = None
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def ok(self) -> bool:
        return self.status == CompletionStatus.SUCCESS

    def to_message(self) -> ChatMessage:
        """Assistant message to append to the conversation history."""
        return ChatMessage(
            role=Role.ASSISTANT,
            content=self.content or None,
            tool_calls=list(self.tool_calls),
        )


class LLMClient:
    """
    Chat completion client bound to one configuration snapshot.

    Every provider is reached through its OpenAI-compatible endpoint, so a
    single SDK covers Moonshot, OpenAI, Anthropic, DeepSeek, Qwen, Gemini and
    Mistral.
    """

    def __init__(self, config: AIConfig):
        """
        Initialize LLM client.

        Args:
            config: Provider configuration snapshot (key, endpoint, model)
        """
        self.config = config
        self._openai: Optional[AsyncOpenAI] = None

    @property
    def openai(self) -> AsyncOpenAI:
        """Lazy-load the OpenAI-compatible client."""
        if not self._openai:
            if not self.config.api_key:
                raise ValueError("LLM API key not configured")
            self._openai = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url or None,
            )
        return self._openai

    async def chat(
        self,
        messages: list[ChatMessage],
        temperature: float = 0.3,
        tools: list[dict[str, Any]] | None = None,
    ) -> CompletionResult:
        """
        Send the conversation to the model.

        Args:
            messages: Full ordered conversation history
            temperature: Sampling temperature
            tools: Tool declarations; tool_choice is "auto" when given

        Returns:
            CompletionResult classified as success, rate limited,
            tools unsupported or fatal

        Raises:
            ValueError: If no API key is configured
        """
        client = self.openai

        request: dict[str, Any] = {
            "model": self.config.model,
            "messages": [message.to_openai() for message in messages],
            "temperature": temperature,
            "max_tokens": self.config.max_tokens,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        try:
            response = await client.chat.completions.create(**request)
        except openai.RateLimitError as e:
            logger.warning(f"LLM rate limited ({self.config.provider.value}): {e}")
            return CompletionResult(status=CompletionStatus.RATE_LIMITED, error=e)
        except openai.BadRequestError as e:
            if tools and "tool" in str(e).lower():
                logger.warning(f"Model '{self.config.model}' rejected tool declarations: {e}")
                return CompletionResult(status=CompletionStatus.TOOLS_UNSUPPORTED, error=e)
            return CompletionResult(status=CompletionStatus.FATAL, error=e)
        except openai.APIError as e:
            return CompletionResult(status=CompletionStatus.FATAL, error=e)

        if not response.choices:
            return CompletionResult(
                status=CompletionStatus.FATAL,
                error=LLMError(f"Empty completion from {self.config.provider.value} ({self.config.model})"),
            )
        message = response.choices[0].message
        tool_calls = []
        for call in message.tool_calls or []:
            function = getattr(call, "function", None)
            if function is None:
                continue
            tool_calls.append(ToolCall(
                id=call.id,
                name=function.name,
                arguments=function.arguments or "{}",
            ))

        return CompletionResult(
            status=CompletionStatus.SUCCESS,
            content=message.content or "",
            tool_calls=tool_calls,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )
