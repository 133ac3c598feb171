from __future__ import annotations

import asyncio

import pytest

from chaos_relay.common.schema import default_params
from chaos_relay.core.completion import Choice
from chaos_relay.core.errors import CompletionError
from chaos_relay.core.relay import Relay, build_messages


def test_relay_returns_first_choice_text(make_backend) -> None:  # noqa: ANN001
    backend = make_backend([Choice(text="Clocks are round calendars."), Choice(text="second")])
    resp = asyncio.run(Relay(backend).relay("what time is it"))
    assert resp.response == "Clocks are round calendars."


def test_conversation_is_system_then_user(make_backend) -> None:  # noqa: ANN001
    backend = make_backend()
    asyncio.run(Relay(backend).relay("remind me to call mom"))
    messages = backend.calls[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user"]
    assert "CRITICAL RESPONSE LENGTH RULE" in messages[0]["content"]
    assert messages[1]["content"] == "remind me to call mom"


@pytest.mark.parametrize("text", [None, ""])
def test_empty_completion_uses_fallback(make_backend, text: str | None) -> None:  # noqa: ANN001
    resp = asyncio.run(Relay(make_backend(text)).relay("hi"))
    assert resp.response == default_params().fallback_reply


def test_whitespace_completion_is_returned_verbatim(make_backend) -> None:  # noqa: ANN001
    resp = asyncio.run(Relay(make_backend("   ")).relay("hi"))
    assert resp.response == "   "


def test_no_choices_uses_fallback(make_backend) -> None:  # noqa: ANN001
    resp = asyncio.run(Relay(make_backend([])).relay("hi"))
    assert resp.response == default_params().fallback_reply


def test_empty_and_long_messages_are_forwarded_as_is(make_backend) -> None:  # noqa: ANN001
    backend = make_backend()
    relay = Relay(backend)
    long_msg = "soup " * 5000
    asyncio.run(relay.relay(""))
    asyncio.run(relay.relay(long_msg))
    assert backend.calls[0]["messages"][1]["content"] == ""
    assert backend.calls[1]["messages"][1]["content"] == long_msg


def test_backend_failure_propagates(make_backend, completion_error) -> None:  # noqa: ANN001
    with pytest.raises(CompletionError):
        asyncio.run(Relay(make_backend(completion_error)).relay("hi"))


def test_repeated_calls_submit_identical_requests(make_backend) -> None:  # noqa: ANN001
    backend = make_backend()
    relay = Relay(backend)
    asyncio.run(relay.relay("same"))
    asyncio.run(relay.relay("same"))
    assert backend.calls[0] == backend.calls[1]
    p = default_params()
    assert backend.calls[0]["model"] == p.model
    assert backend.calls[0]["temperature"] == p.temperature
    assert backend.calls[0]["max_tokens"] == p.max_tokens


def test_build_messages_does_not_share_state() -> None:
    p = default_params()
    first = build_messages(p, "a")
    first.append({"role": "user", "content": "leak"})
    assert len(build_messages(p, "b")) == 2


class _EchoBackend:
    async def create(self, messages, model, temperature, max_tokens):  # noqa: ANN001
        msg = messages[-1]["content"]
        # A finishes after B.
        await asyncio.sleep(0.02 if msg == "A" else 0.0)
        return [Choice(text=f"echo:{msg}")]


def test_concurrent_calls_do_not_interfere() -> None:
    relay = Relay(_EchoBackend())

    async def both():
        return await asyncio.gather(relay.relay("A"), relay.relay("B"))

    a, b = asyncio.run(both())
    assert a.response == "echo:A"
    assert b.response == "echo:B"
