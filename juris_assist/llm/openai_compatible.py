from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import httpx

from .base import CompletionClient, ConfigurationError
from ..env import is_placeholder, load_env, read_api_key
from .extraction import parse_completion
from ..models import CompletionRequest, CompletionResult, ExpectedShape, Failure, FailureKind


OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

_LOG_PREVIEW_CHARS = 500


class StructuredCompletionClient(CompletionClient):
    """
    OpenAI-compatible Chat Completions client that returns validated JSON.

    One `complete()` call is one POST to `{base_url}/chat/completions`, bounded
    by `request.deadline`. Every upstream or parsing problem comes back as a
    `Failure` value; the only exception raised is ConfigurationError, at
    construction time.

    Works with OpenRouter (default) and other OpenAI-compatible providers.

    Env helpers (optional):
      - OPENROUTER_API_KEY (or LLM_API_KEY)
      - LLM_BASE_URL (default: https://openrouter.ai/api/v1)
      - LLM_MAX_TOKENS_FIELD (default: max_tokens)
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = OPENROUTER_BASE_URL,
        default_headers: dict[str, str] | None = None,
        verify_ssl: bool = True,
        max_tokens_field: str = "max_tokens",
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ):
        if is_placeholder(api_key):
            raise ConfigurationError("API key is missing or still set to a placeholder value.")
        self._api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self.default_headers = default_headers or {}
        self.verify_ssl = verify_ssl
        self.max_tokens_field = max_tokens_field
        self._transport = transport
        self.logger = logger or logging.getLogger("juris_assist.client")

    @classmethod
    def from_env(cls, **kwargs: Any) -> "StructuredCompletionClient":
        # Best-effort .env loading (no-op if missing).
        load_env()

        api_key = read_api_key()
        base_url = os.getenv("LLM_BASE_URL") or OPENROUTER_BASE_URL
        max_tokens_field = os.getenv("LLM_MAX_TOKENS_FIELD", "max_tokens")
        return cls(api_key=api_key, base_url=base_url, max_tokens_field=max_tokens_field, **kwargs)

    def _payload(self, request: CompletionRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": request.model,
            "messages": request.messages(),
            "temperature": request.temperature,
            self.max_tokens_field: request.max_output_tokens,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        if request.provider_order:
            payload["provider"] = {"order": list(request.provider_order)}
        return payload

    async def _post(self, request: CompletionRequest) -> httpx.Response:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            **self.default_headers,
        }
        async with httpx.AsyncClient(
            timeout=request.deadline,
            verify=self.verify_ssl,
            transport=self._transport,
        ) as client:
            return await client.post(url, headers=headers, json=self._payload(request))

    async def complete(
        self,
        request: CompletionRequest,
        expected: ExpectedShape,
    ) -> CompletionResult:
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            # wait_for cancels the request task at the deadline, which closes the connection.
            resp = await asyncio.wait_for(self._post(request), timeout=request.deadline)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self.logger.warning(
                "Completion timed out after %.2fs (model=%s)", request.deadline, request.model
            )
            return Failure(kind=FailureKind.TIMEOUT, reason=f"no response within {request.deadline}s")
        except httpx.HTTPError as e:
            self.logger.warning("Completion transport error (model=%s): %s", request.model, e)
            return Failure(kind=FailureKind.TRANSPORT_ERROR, reason=str(e) or type(e).__name__)

        elapsed = loop.time() - started
        self.logger.debug(
            "Completion response %s in %.0fms (model=%s)", resp.status_code, elapsed * 1000, request.model
        )

        if resp.status_code in (401, 403):
            self.logger.error("Completion rejected credentials: %s", resp.status_code)
            return Failure(
                kind=FailureKind.UNAUTHORIZED,
                reason=resp.reason_phrase,
                status_code=resp.status_code,
                body=resp.text,
            )
        if not resp.is_success:
            self.logger.error(
                "Completion upstream error: %s %s", resp.status_code, resp.text[:_LOG_PREVIEW_CHARS]
            )
            return Failure(
                kind=FailureKind.UPSTREAM_ERROR,
                reason=resp.reason_phrase,
                status_code=resp.status_code,
                body=resp.text,
            )

        content = self._content(resp)
        if not content or not content.strip():
            self.logger.warning("Completion returned no content (model=%s)", request.model)
            return Failure(kind=FailureKind.EMPTY_OUTPUT, reason="no content in completion")

        result = parse_completion(content, expected)
        if isinstance(result, Failure):
            self.logger.warning(
                "Completion output rejected: %s (%s); raw content: %s",
                result.reason,
                result.body or "-",
                content[:_LOG_PREVIEW_CHARS],
            )
        return result

    def _content(self, resp: httpx.Response) -> str | None:
        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError, RecursionError):
            self.logger.warning("Unexpected completion envelope: %s", resp.text[:_LOG_PREVIEW_CHARS])
            return None
        return content if isinstance(content, str) else None
