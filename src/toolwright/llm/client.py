"""Built-in OpenAI-compatible async httpx client with tenacity retry.

Provides an async HTTP client for OpenAI-compatible chat completion APIs
(OpenAI, OpenRouter, local servers).  Reads configuration from constructor
arguments or environment variables.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
import tenacity

from toolwright.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)

logger = logging.getLogger(__name__)

API_KEY_ENV = "TOOLWRIGHT_OPENAI_API_KEY"
BASE_URL_ENV = "TOOLWRIGHT_OPENAI_BASE_URL"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: 429, 500, 502, 503, 504, connection errors.
    Not retryable: 401, 403, 400, other client errors.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


class AsyncOpenAIClient:
    """Async httpx client for OpenAI-compatible chat completions.

    Implements the ChatClient protocol. Supports retry with exponential
    backoff for transient errors (429, 5xx). Fails immediately on
    authentication errors (401, 403).

    Usage::

        async with AsyncOpenAIClient(api_key="sk-...") as client:
            response = await client.chat([{"role": "user", "content": "Hello"}])
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str = "gpt-4o-mini",
        timeout: float = 120.0,
        max_retries: int = 3,
    ) -> None:
        """Initialize the OpenAI-compatible client.

        Args:
            api_key: API key. Falls back to TOOLWRIGHT_OPENAI_API_KEY env var.
            base_url: API base URL. Falls back to TOOLWRIGHT_OPENAI_BASE_URL env var,
                then to https://api.openai.com/v1.
            default_model: Model used when a request names none.
            timeout: Request timeout in seconds.
            max_retries: Maximum number of attempts for retryable errors.

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set {API_KEY_ENV} "
                "environment variable."
            )
        self._base_url = (
            base_url or os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)
        ).rstrip("/")
        self._default_model = default_model
        self._timeout = timeout
        self._max_retries = max_retries
        self._wait: tenacity.wait.wait_base = (
            tenacity.wait_exponential(multiplier=1, min=1, max=30)
            + tenacity.wait_random(0, 2)
        )
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send chat completion request with retry.

        Uses tenacity.AsyncRetrying programmatically (not as decorator) so
        that max_retries is configurable per-instance.

        Args:
            messages: Wire-format message dicts.
            model: Model to use. Falls back to default_model.
            tools: Tool definitions in OpenAI function-calling format.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional payload parameters forwarded to the API.

        Returns:
            Full response dict with 'choices', 'usage', 'model', etc.

        Raises:
            LLMAuthError: On 401/403 (no retry).
            LLMRateLimitError: On 429 after all retries exhausted.
            LLMResponseError: On unexpected response format.
            httpx.HTTPError: On other HTTP or transport errors.
        """
        retryer = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=self._wait,
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retryer(
            self._do_chat,
            messages,
            model=model,
            tools=tools,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    async def _do_chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Execute a single chat completion request (no retry)."""
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        response = await self._client.post(
            f"{self._base_url}/chat/completions",
            json=payload,
        )

        # Check for auth errors before raise_for_status
        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}"
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"Response body is not JSON: {response.text[:200]}"
            ) from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        return data

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncOpenAIClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
