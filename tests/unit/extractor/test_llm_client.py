"""Unit tests for CompletionClient."""

from __future__ import annotations

import pytest


class _DummyFunction:
    def __init__(self, arguments: str):
        self.arguments = arguments


class _DummyToolCall:
    def __init__(self, arguments: str):
        self.function = _DummyFunction(arguments)


class _DummyMessage:
    def __init__(self, content: str | None, tool_calls: list[object] | None = None):
        self.content = content
        self.tool_calls = tool_calls


class _DummyChoice:
    def __init__(self, message: _DummyMessage):
        self.message = message


class _DummyResponse:
    def __init__(self, message: _DummyMessage):
        self.choices = [_DummyChoice(message)]


def _client(**overrides):
    from src.extractor.config import ExtractorConfig
    from src.extractor.llm import CompletionClient

    values = {"llm_max_retries": 0, **overrides}
    return CompletionClient(config=ExtractorConfig(_env_file=None, **values))  # type: ignore[call-arg]


class TestCompletionClient:
    async def test_complete_returns_content(self, monkeypatch) -> None:
        client = _client()
        seen: list[dict] = []

        async def _fake_call_completion(*, model, messages):
            seen.append({"model": model, "messages": messages})
            return _DummyResponse(_DummyMessage('{"skills": []}'))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        result = await client.complete("extract", system_prompt="be strict")

        assert result == '{"skills": []}'
        assert seen[0]["model"] == "gpt-4o-mini"
        assert seen[0]["messages"][0] == {"role": "system", "content": "be strict"}
        assert seen[0]["messages"][1] == {"role": "user", "content": "extract"}

    async def test_complete_reads_tool_call_arguments(self, monkeypatch) -> None:
        client = _client()
        tool_calls: list[object] = [_DummyToolCall('{"score": 40}')]

        async def _fake_call_completion(**_kwargs):
            return _DummyResponse(_DummyMessage(None, tool_calls=tool_calls))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        assert await client.complete("x") == '{"score": 40}'

    async def test_falls_through_to_fallback_model(self, monkeypatch) -> None:
        client = _client(llm_fallback_models=["gpt-4o"])
        models: list[str] = []

        async def _fake_call_completion(*, model, messages):  # noqa: ARG001
            models.append(model)
            if model == "gpt-4o-mini":
                raise RuntimeError("model overloaded")
            return _DummyResponse(_DummyMessage("ok"))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        assert await client.complete("x") == "ok"
        assert models == ["gpt-4o-mini", "gpt-4o"]

    async def test_retries_before_moving_on(self, monkeypatch) -> None:
        client = _client(llm_max_retries=1)
        calls = 0

        async def _fake_call_completion(**_kwargs):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("connection reset")
            return _DummyResponse(_DummyMessage("second try"))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        assert await client.complete("x") == "second try"
        assert calls == 2

    async def test_rate_limit_raises_immediately(self, monkeypatch) -> None:
        from src.extractor.llm import CompletionRateLimitError

        client = _client(llm_max_retries=2, llm_fallback_models=["gpt-4o"])
        calls = 0

        async def _fake_call_completion(**_kwargs):
            nonlocal calls
            calls += 1
            raise RuntimeError("Error code: 429 - Rate limit reached")

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        with pytest.raises(CompletionRateLimitError):
            await client.complete("x")
        assert calls == 1

    async def test_all_models_failing_raises_completion_error(self, monkeypatch) -> None:
        from src.extractor.llm import CompletionError, CompletionRateLimitError

        client = _client(llm_fallback_models=["gpt-4o"])

        async def _fake_call_completion(**_kwargs):
            return _DummyResponse(_DummyMessage(None))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("x")
        assert not isinstance(exc_info.value, CompletionRateLimitError)

    async def test_timeout_moves_to_next_model(self, monkeypatch) -> None:
        from litellm.exceptions import Timeout

        client = _client(llm_max_retries=2, llm_fallback_models=["gpt-4o"])
        models: list[str] = []

        async def _fake_call_completion(*, model, messages):  # noqa: ARG001
            models.append(model)
            if model == "gpt-4o-mini":
                raise Timeout(message="timed out", model=model, llm_provider="openai")
            return _DummyResponse(_DummyMessage("late but fine"))

        monkeypatch.setattr(client, "_call_completion", _fake_call_completion)

        assert await client.complete("x") == "late but fine"
        assert models == ["gpt-4o-mini", "gpt-4o"]


class TestModelChain:
    def test_qualifies_and_dedupes_models(self) -> None:
        client = _client(
            llm_provider="anthropic",
            llm_model="claude-3-5-haiku-latest",
            llm_fallback_models=["claude-3-5-haiku-latest", "openai/gpt-4o-mini"],
        )

        assert client.model_chain() == [
            "anthropic/claude-3-5-haiku-latest",
            "openai/gpt-4o-mini",
        ]

    def test_base_url_routes_through_openai_compatible_api(self) -> None:
        client = _client(llm_provider="ollama", llm_base_url="http://localhost:11434/v1")

        assert client.model_chain() == ["openai/gpt-4o-mini"]


def test_normalize_reasoning_effort() -> None:
    from src.extractor.llm import _normalize_reasoning_effort

    assert _normalize_reasoning_effort(None) is None
    assert _normalize_reasoning_effort("  ") is None
    assert _normalize_reasoning_effort("HIGH") == "high"
    assert _normalize_reasoning_effort("off") == "disable"
