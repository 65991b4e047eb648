"""Chat completions client for OpenAI-compatible APIs.

Uses aiohttp.ClientSession. Transient failures (rate limits, 5xx, connection
errors) are retried with exponential backoff; anything else raises
UpstreamError straight away.

Example:
    >>> config = ChatClientConfig.from_env()
    >>> async with ChatClient(config) as client:
    ...     reply = await client.complete([Message.user("What is 1 + 1?")])
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import aiohttp

from ragraph.core.graph.messages import Message

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"


class UpstreamError(Exception):
    """Raised when the chat completions API returns an error."""

    def __init__(self, message: str, status_code: int, response_body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


@dataclass
class ChatClientConfig:
    """Configuration for ChatClient."""

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: float = 0.7

    # Timeouts (seconds)
    connect_timeout: float = 10.0
    read_timeout: float = 120.0

    # Retry configuration
    max_retries: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0
    retryable_status_codes: frozenset[int] = frozenset({429, 500, 502, 503, 504})

    @classmethod
    def from_env(cls, **overrides: Any) -> ChatClientConfig:
        """Build a config from OPENAI_API_KEY, OPENAI_BASE_URL and RAGRAPH_MODEL.

        Keyword arguments that are not None override the environment.

        Raises:
            ValueError: If no API key is available.
        """
        overrides = {k: v for k, v in overrides.items() if v is not None}
        api_key = overrides.pop("api_key", None) or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not set")
        overrides.setdefault("base_url", os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URL))
        overrides.setdefault("model", os.environ.get("RAGRAPH_MODEL", DEFAULT_MODEL))
        return cls(api_key=api_key, **overrides)


class ChatClient:
    """Async client for the /chat/completions endpoint.

    Use as an async context manager, or call connect()/close() yourself.
    """

    def __init__(self, config: ChatClientConfig) -> None:
        self.config = config
        self._session: aiohttp.ClientSession | None = None

    async def connect(self) -> None:
        """Open the underlying HTTP session."""
        if self._session is not None:
            return
        timeout = aiohttp.ClientTimeout(
            connect=self.config.connect_timeout,
            total=self.config.read_timeout,
        )
        self._session = aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> ChatClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def complete(self, messages: Sequence[Message]) -> str:
        """Send a conversation and return the first choice's content.

        Raises:
            UpstreamError: If the API returns an error or an unusable body.
            aiohttp.ClientError: If the connection keeps failing.
        """
        request_body = {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": self.config.temperature,
        }
        trace_id = f"req_{int(time.time() * 1000)}"
        start_time = time.monotonic()
        data = await self._post_with_retry(request_body, trace_id)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f"Malformed completion response: {e}", 200, str(data)) from e

        logger.debug(
            "[%s] chat_complete: model=%s, messages=%d (%.1fs)",
            trace_id,
            self.config.model,
            len(messages),
            time.monotonic() - start_time,
        )
        return content or ""

    def _backoff(self, attempt: int) -> float:
        return min(self.config.retry_base_delay * (2**attempt), self.config.retry_max_delay)

    async def _post_with_retry(self, request_body: dict[str, Any], trace_id: str) -> dict[str, Any]:
        if self._session is None:
            raise RuntimeError("Client not connected. Call connect() first.")

        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        last_error: Exception | None = None

        for attempt in range(self.config.max_retries + 1):
            try:
                async with self._session.post(url, json=request_body) as response:
                    if response.status == 200:
                        return await response.json()

                    error_body = await response.text()
                    if response.status not in self.config.retryable_status_codes:
                        raise UpstreamError(
                            f"Upstream returned {response.status}: {error_body}",
                            response.status,
                            error_body,
                        )
                    last_error = UpstreamError(
                        f"Upstream returned {response.status}",
                        response.status,
                        error_body,
                    )
                    reason = str(response.status)
            except aiohttp.ClientError as e:
                last_error = e
                reason = type(e).__name__

            if attempt < self.config.max_retries:
                delay = self._backoff(attempt)
                logger.warning(
                    "Request %s failed with %s, retrying in %.1fs (attempt %d/%d)",
                    trace_id,
                    reason,
                    delay,
                    attempt + 1,
                    self.config.max_retries,
                )
                await asyncio.sleep(delay)

        if last_error:
            raise last_error
        raise RuntimeError("Retry loop exited without result or error")
