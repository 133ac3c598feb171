from __future__ import annotations

from typing import Any, Callable

import pytest

from chaos_relay.common.config import Settings
from chaos_relay.core.completion import Choice
from chaos_relay.core.errors import CompletionError


class FakeBackend:
    """Records each call; replies from a script of outcomes (text, None, a choice list, or an exception)."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes) or ["Hello test"]
        self.calls: list[dict[str, Any]] = []

    async def create(self, messages, model, temperature, max_tokens):  # noqa: ANN001
        self.calls.append(
            {"messages": messages, "model": model, "temperature": temperature, "max_tokens": max_tokens}
        )
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, list):
            return outcome
        return [Choice(text=outcome)]


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    return FakeBackend


@pytest.fixture
def completion_error() -> CompletionError:
    return CompletionError()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        base = dict(
            api_key="test-key",
            base_url="http://backend.test/openai",
            allowed_origins=("*",),
            backend_url="http://localhost:3000",
            timeout=5.0,
            host="127.0.0.1",
            port=3000,
            log_level="INFO",
        )
        base.update(overrides)
        return Settings(**base)

    return _make
