"""Tool-calling conversation loop between the model and web search."""
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

from media_tracker.schemas.config import AIConfig, SearchConfig
from media_tracker.schemas.conversation import ChatMessage, ToolCall
from media_tracker.services.llm.client import (
    CompletionResult,
    CompletionStatus,
    LLMClient,
    LLMError,
)
from media_tracker.services.search.base import SearchOutcome
from media_tracker.services.search.dispatcher import dispatch

logger = logging.getLogger(__name__)

MAX_TURNS = 5
RATE_LIMIT_BACKOFF_SECONDS = 2.0
NO_RESULTS = "No relevant results found."

WEB_SEARCH_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "web_search",
        "description": (
            "Search the web for real-time information. Use this tool when you "
            "need current events, news, or specific data."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The search query.",
                },
            },
            "required": ["query"],
        },
    },
}

# google_search is what some backends call the tool regardless of the declared name
SEARCH_TOOL_NAMES = {"web_search", "google_search"}
# Moonshot's server-side search; the backend runs it once we echo the arguments
BUILTIN_SEARCH_TOOL = "$web_search"

SearchFn = Callable[[str, SearchConfig], Awaitable[SearchOutcome]]


def format_search_outcome(outcome: SearchOutcome) -> str:
    """Render a dispatcher outcome as tool message content."""
    if not outcome:
        return NO_RESULTS
    if isinstance(outcome, str):
        return outcome
    return json.dumps([result.model_dump() for result in outcome], ensure_ascii=False)


class ConversationEngine:
    """
    Drives one bounded tool-calling exchange.

    Each turn sends the whole history to the model. Tool calls are executed
    in request order and their results appended before the next turn. A reply
    without tool calls ends the exchange; running out of turns yields "".
    """

    def __init__(
        self,
        config: AIConfig,
        llm_client: LLMClient | None = None,
        max_turns: int = MAX_TURNS,
        search: SearchFn | None = None,
    ):
        self.config = config
        self.llm = llm_client or LLMClient(config)
        self.max_turns = max_turns
        self.search = search or dispatch
        # Token usage of the last run, summed over every completion request
        self.input_tokens = 0
        self.output_tokens = 0

    async def run(
        self,
        messages: list[ChatMessage],
        temperature: float | None = None,
    ) -> str:
        """
        Run the exchange to a final answer.

        Args:
            messages: Initial system/user messages
            temperature: Sampling temperature (defaults to the config's)

        Returns:
            The model's final text, or "" if the turn budget ran out

        Raises:
            LLMError: On non-recoverable endpoint failures
            ValueError: If no LLM API key is configured
        """
        history = list(messages)
        self.input_tokens = 0
        self.output_tokens = 0
        if temperature is None:
            temperature = self.config.temperature
        tools = [WEB_SEARCH_TOOL] if self.config.search.enabled else None

        for turn in range(1, self.max_turns + 1):
            result = await self._complete(history, temperature, tools)
            if result.status == CompletionStatus.TOOLS_UNSUPPORTED:
                logger.warning(f"Model '{self.config.model}' does not support tools, continuing without search")
                tools = None
                result = await self._complete(history, temperature, tools)
            if not result.ok:
                raise LLMError(f"LLM request failed ({result.status.value}): {result.error}") from result.error

            if not result.tool_calls:
                logger.info(
                    f"Answer after {turn} turn(s), {self.input_tokens} input / {self.output_tokens} output tokens"
                )
                return result.content

            history.append(result.to_message())
            for call in result.tool_calls:
                history.append(await self._execute(call))
            logger.info(f"Turn {turn}: executed {len(result.tool_calls)} tool call(s)")

        logger.warning(f"No final answer after {self.max_turns} turns")
        return ""

    async def _complete(
        self,
        history: list[ChatMessage],
        temperature: float,
        tools: list[dict[str, Any]] | None,
    ) -> CompletionResult:
        result = await self.llm.chat(history, temperature=temperature, tools=tools)
        if result.status == CompletionStatus.RATE_LIMITED:
            logger.warning(f"Rate limited, retrying in {RATE_LIMIT_BACKOFF_SECONDS}s")
            await asyncio.sleep(RATE_LIMIT_BACKOFF_SECONDS)
            result = await self.llm.chat(history, temperature=temperature, tools=tools)
        self.input_tokens += result.input_tokens
        self.output_tokens += result.output_tokens
        return result

    async def _execute(self, call: ToolCall) -> ChatMessage:
        """Execute one tool call and build its tool-result message."""
        if call.name == BUILTIN_SEARCH_TOOL:
            return ChatMessage.tool_result(call, call.arguments)

        if call.name not in SEARCH_TOOL_NAMES:
            logger.warning(f"Model requested unsupported tool '{call.name}'")
            return ChatMessage.tool_result(call, f"Error: unsupported tool '{call.name}'")

        try:
            arguments = json.loads(call.arguments or "{}")
        except json.JSONDecodeError as e:
            return ChatMessage.tool_result(call, f"Error: invalid parameters for {call.name}: {e}")

        query = arguments.get("query") if isinstance(arguments, dict) else None
        if not isinstance(query, str) or not query.strip():
            return ChatMessage.tool_result(
                call, f"Error: invalid parameters for {call.name}: 'query' is required"
            )

        outcome = await self.search(query, self.config.search)
        return ChatMessage.tool_result(call, format_search_outcome(outcome))
