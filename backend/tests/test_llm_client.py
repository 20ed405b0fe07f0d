"""Tests for LLM client with mocked API calls."""
import pytest
import httpx
import openai
from unittest.mock import AsyncMock, Mock, patch

from media_tracker.schemas.config import AIConfig, LLMProvider
from media_tracker.schemas.conversation import ChatMessage, Role
from media_tracker.services.llm.client import CompletionStatus, LLMClient, LLMError

CONFIG = AIConfig(api_key="sk-test").with_provider(LLMProvider.OPENAI)


def api_error(cls, status: int, message: str):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return cls(message, response=httpx.Response(status, request=request), body=None)


def completion(content: str | None = "Hello", tool_calls=None):
    mock_message = Mock()
    mock_message.content = content
    mock_message.tool_calls = tool_calls

    mock_choice = Mock()
    mock_choice.message = mock_message

    mock_response = Mock()
    mock_response.choices = [mock_choice]
    mock_response.usage = Mock(prompt_tokens=15, completion_tokens=25)
    return mock_response


def tool_call(call_id: str, name: str, arguments: str):
    call = Mock()
    call.id = call_id
    call.function.name = name
    call.function.arguments = arguments
    return call


def mock_openai(mock_openai_class, **create_kwargs):
    mock_client = Mock()
    mock_client.chat.completions.create = AsyncMock(**create_kwargs)
    mock_openai_class.return_value = mock_client
    return mock_client


def test_llm_provider_enum():
    """Test LLM provider enum values."""
    assert LLMProvider.MOONSHOT.value == "moonshot"
    assert LLMProvider.OPENAI.value == "openai"


def test_openai_property_lazy_loading():
    """Test OpenAI-compatible client is lazily loaded with config endpoint."""
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        client = LLMClient(CONFIG)
        assert client._openai is None

        first = client.openai
        second = client.openai

        assert first is second
        mock_openai_class.assert_called_once_with(
            api_key="sk-test",
            base_url="https://api.openai.com/v1",
        )


def test_openai_property_requires_api_key():
    client = LLMClient(AIConfig())
    with pytest.raises(ValueError, match="LLM API key not configured"):
        client.openai


@pytest.mark.asyncio
async def test_chat_returns_text():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_client = mock_openai(mock_openai_class, return_value=completion("OpenAI response"))

        client = LLMClient(CONFIG)
        result = await client.chat([ChatMessage.user("Test prompt")], temperature=0.5)

        assert result.status == CompletionStatus.SUCCESS
        assert result.ok
        assert result.content == "OpenAI response"
        assert result.tool_calls == []
        assert result.input_tokens == 15
        assert result.output_tokens == 25

        mock_client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o",
            messages=[{"role": "user", "content": "Test prompt"}],
            temperature=0.5,
            max_tokens=2000,
        )


@pytest.mark.asyncio
async def test_chat_with_tools_sets_tool_choice_auto():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_client = mock_openai(mock_openai_class, return_value=completion())
        tools = [{"type": "function", "function": {"name": "web_search"}}]

        await LLMClient(CONFIG).chat([ChatMessage.user("x")], tools=tools)

        call_kwargs = mock_client.chat.completions.create.call_args[1]
        assert call_kwargs["tools"] == tools
        assert call_kwargs["tool_choice"] == "auto"


@pytest.mark.asyncio
async def test_chat_parses_tool_calls():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_openai(mock_openai_class, return_value=completion(
            content=None,
            tool_calls=[tool_call("call_1", "web_search", '{"query": "Dune"}')],
        ))

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")])

        assert result.content == ""
        assert len(result.tool_calls) == 1
        assert result.tool_calls[0].id == "call_1"
        assert result.tool_calls[0].name == "web_search"
        assert result.tool_calls[0].arguments == '{"query": "Dune"}'

        message = result.to_message()
        assert message.role == Role.ASSISTANT
        assert message.content is None
        assert message.tool_calls == result.tool_calls


@pytest.mark.asyncio
async def test_chat_classifies_rate_limit():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_openai(mock_openai_class, side_effect=api_error(openai.RateLimitError, 429, "Too many requests"))

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")])

        assert result.status == CompletionStatus.RATE_LIMITED
        assert isinstance(result.error, openai.RateLimitError)


@pytest.mark.asyncio
async def test_chat_classifies_tools_unsupported():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_openai(mock_openai_class, side_effect=api_error(openai.BadRequestError, 400, "tools are not supported"))

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")], tools=[{"type": "function"}])

        assert result.status == CompletionStatus.TOOLS_UNSUPPORTED


@pytest.mark.asyncio
async def test_chat_bad_request_without_tools_is_fatal():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_openai(mock_openai_class, side_effect=api_error(openai.BadRequestError, 400, "tool message invalid"))

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")])

        assert result.status == CompletionStatus.FATAL


@pytest.mark.asyncio
async def test_chat_classifies_server_error_as_fatal():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        mock_openai(mock_openai_class, side_effect=api_error(openai.InternalServerError, 500, "boom"))

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")])

        assert result.status == CompletionStatus.FATAL
        assert not result.ok


@pytest.mark.asyncio
async def test_chat_empty_choices_is_fatal():
    with patch("media_tracker.services.llm.client.AsyncOpenAI") as mock_openai_class:
        empty = completion()
        empty.choices = []
        mock_openai(mock_openai_class, return_value=empty)

        result = await LLMClient(CONFIG).chat([ChatMessage.user("x")])

        assert result.status == CompletionStatus.FATAL
        assert isinstance(result.error, LLMError)
