"""Tests for the toolwright.llm package.

Tests cover:
- AsyncOpenAIClient: request formatting, retry behavior, auth errors, env config
- ChatClient protocol: conformance, custom implementations
- ChatResponse parsing
- Error hierarchy: correct inheritance, error attributes
"""

from __future__ import annotations

import json

import httpx
import pytest
import tenacity

from tests.fakes import ScriptedChatClient, text_response, tool_call_response
from toolwright.conversation import ToolCall
from toolwright.exceptions import InvalidConfigurationError, ToolwrightError, UpstreamError
from toolwright.llm import (
    AsyncOpenAIClient,
    ChatClient,
    ChatResponse,
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)


# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------

USER_MESSAGES = [{"role": "user", "content": "Test"}]


def _make_client(
    handler=None,
    api_key: str = "test-key",
    base_url: str = "http://test-api",
    max_retries: int = 3,
    **kwargs,
) -> AsyncOpenAIClient:
    """Create an AsyncOpenAIClient backed by a mock transport, with no backoff."""
    client = AsyncOpenAIClient(
        api_key=api_key,
        base_url=base_url,
        max_retries=max_retries,
        **kwargs,
    )
    client._wait = tenacity.wait_none()
    if handler is not None:
        client._client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )
    return client


def _counting(responses: list[httpx.Response]):
    """Handler replaying ``responses`` in order; returns (handler, requests)."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses[min(len(requests), len(responses)) - 1]

    return handler, requests


# ===========================================================================
# Error hierarchy
# ===========================================================================


class TestErrorHierarchy:
    """Test LLM error class hierarchy."""

    def test_client_errors_are_upstream_errors(self):
        for exc in (LLMRateLimitError, LLMAuthError, LLMResponseError):
            assert issubclass(exc, LLMClientError)
        assert issubclass(LLMClientError, UpstreamError)

    def test_config_error_is_configuration_error(self):
        assert issubclass(LLMConfigError, InvalidConfigurationError)
        assert not issubclass(LLMConfigError, UpstreamError)

    def test_rate_limit_error_has_retry_after(self):
        err = LLMRateLimitError("slow down", retry_after=30.0)
        assert err.retry_after == 30.0
        assert "retry after 30.0s" in str(err)

    def test_rate_limit_error_no_retry_after(self):
        assert LLMRateLimitError().retry_after is None

    def test_all_errors_catchable_as_toolwright_error(self):
        for exc in (LLMClientError, LLMConfigError, LLMRateLimitError, LLMAuthError, LLMResponseError):
            with pytest.raises(ToolwrightError):
                raise exc("boom")


# ===========================================================================
# Chat requests
# ===========================================================================


class TestAsyncOpenAIClientChat:
    @pytest.mark.asyncio
    async def test_chat_success(self):
        handler, _ = _counting([httpx.Response(200, json=text_response("Hello!"))])
        async with _make_client(handler) as client:
            response = await client.chat(USER_MESSAGES)
        assert response["choices"][0]["message"]["content"] == "Hello!"

    @pytest.mark.asyncio
    async def test_chat_request_format(self):
        handler, requests = _counting([httpx.Response(200, json=text_response())])
        tools = [{"type": "function", "function": {"name": "add", "parameters": {}}}]
        async with _make_client(handler) as client:
            await client.chat(USER_MESSAGES, model="gpt-4o", tools=tools)

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://test-api/chat/completions"
        assert request.headers["authorization"] == "Bearer test-key"
        body = json.loads(request.content)
        assert body == {"model": "gpt-4o", "messages": USER_MESSAGES, "tools": tools}

    @pytest.mark.asyncio
    async def test_chat_with_default_model(self):
        handler, requests = _counting([httpx.Response(200, json=text_response())])
        async with _make_client(handler, default_model="my-model") as client:
            await client.chat(USER_MESSAGES)
        assert json.loads(requests[0].content)["model"] == "my-model"

    @pytest.mark.asyncio
    async def test_empty_tools_omitted(self):
        handler, requests = _counting([httpx.Response(200, json=text_response())])
        async with _make_client(handler) as client:
            await client.chat(USER_MESSAGES, tools=[])
        assert "tools" not in json.loads(requests[0].content)

    @pytest.mark.asyncio
    async def test_chat_with_optional_params(self):
        handler, requests = _counting([httpx.Response(200, json=text_response())])
        async with _make_client(handler) as client:
            await client.chat(USER_MESSAGES, temperature=0.2, max_tokens=50, seed=7)
        body = json.loads(requests[0].content)
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 50
        assert body["seed"] == 7


# ===========================================================================
# Retry behavior
# ===========================================================================


class TestAsyncOpenAIClientRetry:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    async def test_retry_then_success(self, status):
        handler, requests = _counting(
            [httpx.Response(status, json={"error": "transient"}), httpx.Response(200, json=text_response())]
        )
        async with _make_client(handler) as client:
            response = await client.chat(USER_MESSAGES)
        assert len(requests) == 2
        assert "choices" in response

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_no_retry_on_auth_error(self, status):
        handler, requests = _counting([httpx.Response(status, json={"error": "denied"})])
        async with _make_client(handler) as client:
            with pytest.raises(LLMAuthError, match="Authentication failed"):
                await client.chat(USER_MESSAGES)
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_no_retry_on_400(self):
        handler, requests = _counting([httpx.Response(400, json={"error": "bad request"})])
        async with _make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.chat(USER_MESSAGES)
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_max_retries_exhausted(self):
        handler, requests = _counting(
            [httpx.Response(429, json={"error": "rate limited"}, headers={"Retry-After": "42"})]
        )
        async with _make_client(handler, max_retries=3) as client:
            with pytest.raises(LLMRateLimitError) as exc_info:
                await client.chat(USER_MESSAGES)
        assert len(requests) == 3
        assert exc_info.value.retry_after == 42.0

    @pytest.mark.asyncio
    async def test_connect_error_retried(self):
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=text_response())

        async with _make_client(handler) as client:
            await client.chat(USER_MESSAGES)
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_response_missing_choices_raises(self):
        handler, _ = _counting([httpx.Response(200, json={"error": "no choices"})])
        async with _make_client(handler) as client:
            with pytest.raises(LLMResponseError, match="missing 'choices'"):
                await client.chat(USER_MESSAGES)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        handler, _ = _counting([httpx.Response(200, text="<html>oops</html>")])
        async with _make_client(handler) as client:
            with pytest.raises(LLMResponseError, match="not JSON"):
                await client.chat(USER_MESSAGES)


# ===========================================================================
# Configuration
# ===========================================================================


class TestAsyncOpenAIClientConfig:
    @pytest.mark.asyncio
    async def test_env_var_api_key(self, monkeypatch):
        monkeypatch.setenv("TOOLWRIGHT_OPENAI_API_KEY", "env-key-123")
        client = AsyncOpenAIClient()
        assert client._api_key == "env-key-123"
        await client.close()

    @pytest.mark.asyncio
    async def test_env_var_base_url(self, monkeypatch):
        monkeypatch.setenv("TOOLWRIGHT_OPENAI_API_KEY", "test-key")
        monkeypatch.setenv("TOOLWRIGHT_OPENAI_BASE_URL", "http://custom-api/v1")
        client = AsyncOpenAIClient()
        assert client.base_url == "http://custom-api/v1"
        await client.close()

    @pytest.mark.asyncio
    async def test_constructor_overrides_env(self, monkeypatch):
        monkeypatch.setenv("TOOLWRIGHT_OPENAI_API_KEY", "env-key")
        monkeypatch.setenv("TOOLWRIGHT_OPENAI_BASE_URL", "http://env-url/v1")
        client = AsyncOpenAIClient(api_key="arg-key", base_url="http://arg-url/v1/")
        assert client._api_key == "arg-key"
        assert client.base_url == "http://arg-url/v1"
        await client.close()

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.delenv("TOOLWRIGHT_OPENAI_API_KEY", raising=False)
        with pytest.raises(LLMConfigError, match="No API key"):
            AsyncOpenAIClient()

    def test_default_base_url(self, monkeypatch):
        monkeypatch.delenv("TOOLWRIGHT_OPENAI_BASE_URL", raising=False)
        client = AsyncOpenAIClient(api_key="k")
        assert client.base_url == "https://api.openai.com/v1"

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        async with AsyncOpenAIClient(api_key="test-key") as client:
            assert isinstance(client, AsyncOpenAIClient)
        assert client._client.is_closed


# ===========================================================================
# Protocol and response parsing
# ===========================================================================


class TestProtocolConformance:
    def test_openai_client_conforms(self):
        client = AsyncOpenAIClient(api_key="k")
        assert isinstance(client, ChatClient)

    def test_scripted_client_conforms(self):
        assert isinstance(ScriptedChatClient([text_response()]), ChatClient)

    def test_missing_method_fails_protocol(self):
        class NoClose:
            async def chat(self, messages, **kwargs):
                return {}

        assert not isinstance(NoClose(), ChatClient)


class TestChatResponse:
    def test_text_response(self):
        parsed = ChatResponse.from_openai(text_response("Hi"))
        assert parsed.content == "Hi"
        assert not parsed.has_tool_calls
        assert parsed.finish_reason == "stop"
        assert parsed.usage["total_tokens"] == 15

    def test_tool_call_response(self):
        parsed = ChatResponse.from_openai(
            tool_call_response([("add", {"a": 2, "b": 2}, "call_1"), ("greet", {"name": "x"}, "call_2")])
        )
        assert parsed.content is None
        assert parsed.has_tool_calls
        assert [tc.name for tc in parsed.tool_calls] == ["add", "greet"]
        assert parsed.tool_calls[0] == ToolCall(id="call_1", name="add", arguments='{"a": 2, "b": 2}')

    @pytest.mark.parametrize(
        "response",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"message": "text"}]},
            {"choices": [{"message": {"content": None, "tool_calls": ["oops"]}}]},
            {"choices": [{"message": {"content": None, "tool_calls": {"id": "c"}}}]},
            {"choices": [{"message": {"tool_calls": [{"id": "c", "function": "add"}]}}]},
            {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]},
        ],
    )
    def test_malformed_response(self, response):
        with pytest.raises(LLMResponseError):
            ChatResponse.from_openai(response)
