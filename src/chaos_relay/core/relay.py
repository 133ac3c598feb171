"""Message relay: one user message in, one short persona reply out.

Stateless. Both transports share a single `Relay`; each owns its own
error translation.
"""
from __future__ import annotations
import logging
from typing import Protocol

from chaos_relay.common.schema import ChatResponse, GenerationParams, default_params
from chaos_relay.core.completion import Choice

LOGGER = logging.getLogger("chaos_relay.core.relay")

class CompletionBackend(Protocol):
    async def create(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> list[Choice]: ...

def build_messages(params: GenerationParams, message: str) -> list[dict[str, str]]:
    """System persona turn followed by the caller's message, forwarded as-is."""
    return [
        {"role": "system", "content": params.system_prompt},
        {"role": "user", "content": message},
    ]

class Relay:
    def __init__(self, backend: CompletionBackend, params: GenerationParams | None = None) -> None:
        self.backend = backend
        self.params = params or default_params()

    async def relay(self, message: str) -> ChatResponse:
        """
        Relay `message` to the completion backend.

        Returns the first choice's text verbatim, or the fallback reply when it is empty
        or missing. `CompletionError` from the backend propagates.
        """
        p = self.params
        choices = await self.backend.create(
            messages=build_messages(p, message),
            model=p.model,
            temperature=p.temperature,
            max_tokens=p.max_tokens,
        )
        text = choices[0].text if choices else None
        if not text:
            LOGGER.info("Empty completion; using fallback reply")
            return ChatResponse(response=p.fallback_reply)
        return ChatResponse(response=text)
