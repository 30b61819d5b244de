"""
LLM Gateway — Wraps the Groq client with timeout, a single retry, and per-call token usage.

Failures are reported, never masked: every call returns an LLMResult whose
error_kind tells the caller whether the service was unreachable or answered
with something unusable.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from groq import (
    APIConnectionError,
    APIStatusError,
    Groq,
    InternalServerError,
    RateLimitError,
)

from govcheck.config import settings
from govcheck.models.llm_models import LLMErrorKind, LLMResult

logger = logging.getLogger("govcheck.llm")

# APITimeoutError subclasses APIConnectionError
TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class LLMGateway:
    """
    Groq LLM client wrapper with:
    - Configurable timeout
    - At most one retry on transient network failure
    - Token usage reported on every result (no shared counter)
    """

    def __init__(self, api_key: str | None = None, client: Any = None) -> None:
        self.api_key = settings.groq_api_key if api_key is None else api_key
        self.model = settings.govcheck_model
        self.timeout = settings.llm_timeout
        self.max_retries = min(settings.llm_max_retries, 1)
        self.retry_delay = 1.0
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    @property
    def client(self) -> Any:
        if self._client is None:
            # SDK retries disabled; the retry policy lives here
            self._client = Groq(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def complete(
        self,
        prompt: str,
        *,
        system: str = "",
        max_tokens: int = 1200,
        temperature: float | None = None,
        json_mode: bool = True,
    ) -> LLMResult:
        """
        Send a prompt to the LLM.

        Runs the synchronous Groq SDK in a thread pool to avoid blocking
        the async event loop.

        Args:
            prompt: User message
            system: Optional system message
            max_tokens: Completion token cap
            temperature: Defaults to settings.llm_temperature
            json_mode: Request and parse a JSON object

        Returns:
            LLMResult. On JSON mode, `parsed` holds the decoded object.
        """
        if not self.configured:
            return LLMResult(
                error_kind=LLMErrorKind.NOT_CONFIGURED,
                error="LLM API key not configured",
            )

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        attempts = self.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                response = await asyncio.to_thread(
                    self._sync_complete,
                    messages,
                    max_tokens,
                    settings.llm_temperature if temperature is None else temperature,
                    json_mode,
                )
            except TRANSIENT_ERRORS as e:
                last_error = e
                logger.warning(f"LLM attempt {attempt + 1}/{attempts} failed: {e}")
                if attempt < attempts - 1:
                    await asyncio.sleep(self.retry_delay)
                continue
            except APIStatusError as e:
                # 4xx other than rate limiting: retrying will not help
                logger.error(f"LLM request rejected ({e.status_code}): {e}")
                return LLMResult(error_kind=LLMErrorKind.UNREACHABLE, error=str(e))

            return self._to_result(response, json_mode)

        logger.error(f"LLM gateway exhausted retries. Last error: {last_error}")
        return LLMResult(error_kind=LLMErrorKind.UNREACHABLE, error=str(last_error))

    def _sync_complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
        json_mode: bool,
    ):
        """Synchronous Groq completion call."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        return self.client.chat.completions.create(**kwargs)

    def _to_result(self, response: Any, json_mode: bool) -> LLMResult:
        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        tokens = (getattr(usage, "total_tokens", 0) or 0) if usage else 0

        if not json_mode:
            if not content.strip():
                return LLMResult(
                    content=content,
                    tokens_used=tokens,
                    error_kind=LLMErrorKind.MALFORMED,
                    error="LLM returned empty content",
                )
            return LLMResult(content=content, tokens_used=tokens, success=True)

        parsed = extract_json(content)
        if parsed is None:
            logger.warning(f"LLM returned non-JSON content: {content[:200]!r}")
            return LLMResult(
                content=content,
                tokens_used=tokens,
                error_kind=LLMErrorKind.MALFORMED,
                error="LLM returned non-JSON or empty response",
            )
        return LLMResult(content=content, parsed=parsed, tokens_used=tokens, success=True)


def extract_json(text: str) -> dict | None:
    """Parse a JSON object, tolerating markdown fences and surrounding prose."""
    if not text or not text.strip():
        return None

    try:
        value = json.loads(text)
        return value if isinstance(value, dict) else None
    except json.JSONDecodeError:
        pass

    # Try ```json ... ``` blocks
    match = re.search(r"```(?:json)?\s*\n(.*?)\n```", text, re.DOTALL)
    if match:
        try:
            value = json.loads(match.group(1))
            if isinstance(value, dict):
                return value
        except json.JSONDecodeError:
            pass

    # Try to find first { ... } block
    start = text.find("{")
    if start != -1:
        depth = 0
        for i in range(start, len(text)):
            if text[i] == "{":
                depth += 1
            elif text[i] == "}":
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(text[start : i + 1])
                    except json.JSONDecodeError:
                        break

    return None
