"""LLM client for résumé extraction and review prompts.

Uses LiteLLM to route completions to the configured provider and falls
through a list of models when one is unavailable.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any, Protocol

from src.errors import CvScorerError
from src.extractor.config import ExtractorConfig, get_extractor_config
from src.utils.logging import get_logger

logger = get_logger("extractor.llm")

# LiteLLM loads `.env` into process environment by default (DEV mode).
# Default to PRODUCTION unless the user explicitly opted into DEV.
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")

_RATE_LIMIT_MARKERS = ("429", "rate limit", "ratelimit", "quota", "resource_exhausted")


class CompletionError(CvScorerError):
    """Exception raised when a completion cannot be obtained."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class CompletionRateLimitError(CompletionError):
    """The provider is throttling requests; callers must not fall back to defaults."""


class TextCompleter(Protocol):
    async def complete(self, prompt: str, *, system_prompt: str | None = None) -> str: ...


def _is_rate_limit(error: Exception) -> bool:
    from litellm.exceptions import RateLimitError

    if isinstance(error, RateLimitError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


class CompletionClient:
    """Async LiteLLM client returning raw completion text."""

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        self.config = config or get_extractor_config()

    def _qualify_model(self, model: str) -> str:
        """Return provider-qualified model name for LiteLLM routing."""
        if "/" in model:
            return model
        if self.config.llm_base_url:
            return f"openai/{model}"
        if self.config.llm_provider == "openai":
            return model
        return f"{self.config.llm_provider}/{model}"

    def model_chain(self) -> list[str]:
        chain: list[str] = []
        for model in [self.config.llm_model, *self.config.llm_fallback_models]:
            qualified = self._qualify_model(model)
            if qualified not in chain:
                chain.append(qualified)
        return chain

    async def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        """Return the completion text for `prompt`.

        Raises:
            CompletionRateLimitError: The provider throttled the request.
            CompletionError: Every model in the chain failed.
        """
        from litellm.exceptions import Timeout

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        last_error: Exception | None = None
        for model in self.model_chain():
            for attempt in range(self.config.llm_max_retries + 1):
                try:
                    response = await self._call_completion(model=model, messages=messages)
                    return self._parse_response(response)

                except CompletionError as e:
                    last_error = e
                    break

                except Timeout as e:
                    last_error = e
                    logger.warning(
                        "LLM request to %s timed out after %ss", model, self.config.llm_timeout
                    )
                    break

                except Exception as e:
                    if _is_rate_limit(e):
                        raise CompletionRateLimitError(
                            f"LLM provider rate limit reached ({model}): {e}", e
                        ) from e
                    last_error = e
                    if attempt < self.config.llm_max_retries:
                        delay = min(0.5 * (2**attempt), 8.0)
                        logger.warning(
                            "LLM call to %s failed (attempt %s), retrying in %.1fs: %s",
                            model,
                            attempt + 1,
                            delay,
                            e,
                        )
                        await asyncio.sleep(delay)
                        continue
                    logger.warning("LLM model %s exhausted: %s", model, e)

        raise CompletionError(f"LLM call failed for all models: {last_error}", last_error)

    async def _call_completion(self, *, model: str, messages: list[dict[str, str]]):
        from litellm import acompletion

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "timeout": self.config.llm_timeout,
        }

        reasoning_effort = _normalize_reasoning_effort(self.config.llm_reasoning_effort)
        if reasoning_effort is not None:
            kwargs["reasoning_effort"] = reasoning_effort

        if self.config.llm_api_key:
            kwargs["api_key"] = self.config.llm_api_key

        if self.config.llm_base_url:
            kwargs["base_url"] = self.config.llm_base_url

        return await acompletion(**kwargs)

    def _parse_response(self, response) -> str:
        message = response.choices[0].message
        content = getattr(message, "content", None)

        if content is None:
            tool_calls = getattr(message, "tool_calls", None) or []
            if tool_calls:
                function = getattr(tool_calls[0], "function", None)
                arguments = getattr(function, "arguments", None)
                if isinstance(arguments, str) and arguments.strip():
                    content = arguments

        if content is None:
            raise CompletionError("LLM returned no content.")
        return str(content)


def _normalize_reasoning_effort(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if not normalized:
        return None
    if normalized in {"off", "disabled", "0", "false"}:
        return "disable"
    return normalized
