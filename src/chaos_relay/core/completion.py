"""Async client for an OpenAI-compatible chat completions endpoint (Groq by default).

POST {base_url}/v1/chat/completions  { model, messages, temperature, max_tokens }
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from chaos_relay.core.errors import CompletionError

LOGGER = logging.getLogger("chaos_relay.core.completion")

@dataclass(frozen=True)
class Choice:
    """One completion candidate; `text` is None when the backend sent no content."""
    text: str | None

class CompletionClient:
    """
    Thin wrapper over a shared `httpx.AsyncClient`.

    Args:
        http: Client owned by the caller (opened/closed with the app lifespan).
        base_url: Backend root, without the `/v1/...` suffix.
        api_key: Bearer credential.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: str) -> None:
        self._http = http
        self._url = f"{base_url.rstrip('/')}/v1/chat/completions"
        self._headers = {"Authorization": f"Bearer {api_key}"}

    async def create(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> list[Choice]:
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        start = time.time()
        try:
            r = await self._http.post(self._url, headers=self._headers, json=payload)
            r.raise_for_status()
            data = r.json()
        except Exception as e:
            LOGGER.error("Completion request failed: %s", e)
            raise CompletionError() from e

        LOGGER.debug("Completion latency: %sms", int((time.time() - start) * 1000))
        return _parse_choices(data)

def _parse_choices(data: Any) -> list[Choice]:
    """Extract `choices[*].message.content`; a malformed body is a backend failure."""
    try:
        raw = data["choices"]
        choices = []
        for item in raw:
            content = (item.get("message") or {}).get("content")
            choices.append(Choice(text=content if isinstance(content, str) else None))
        return choices
    except Exception as e:
        LOGGER.error("Malformed completion response: %s", e)
        raise CompletionError() from e
