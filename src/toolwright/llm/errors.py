"""Errors raised by chat transports.

Every failure to get a usable completion is an ``UpstreamError``, so the
agent loop surfaces a rate limit, a rejected key or a garbled body through
one type and callers can decide whether to retry the whole run.  Only a
client that cannot be built at all (no API key) is a configuration error.
"""

from __future__ import annotations

from toolwright.exceptions import InvalidConfigurationError, UpstreamError


class LLMClientError(UpstreamError):
    """A chat request reached the API and failed."""


class LLMConfigError(InvalidConfigurationError):
    """The client is missing required settings, such as its API key."""


class LLMRateLimitError(LLMClientError):
    """HTTP 429 persisted through every retry attempt.

    Attributes:
        retry_after: Server-suggested delay in seconds from the last
            ``Retry-After`` header, or None.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMAuthError(LLMClientError):
    """The API rejected the credentials (401/403); never retried."""


class LLMResponseError(LLMClientError):
    """The response body is not a chat completion the agent can act on."""
