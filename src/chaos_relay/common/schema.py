"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field

from chaos_relay.common.templates import load_generation_config, load_template

class ChatRequest(BaseModel):
    message: str = Field(..., description="User message to relay")

class ChatResponse(BaseModel):
    response: str = Field(..., description="Persona reply, never empty")

class SocketEvent(BaseModel):
    """One named event on the WebSocket channel."""
    event: str
    data: dict[str, Any] = Field(default_factory=dict)

@dataclass(frozen=True)
class GenerationParams:
    """Fixed generation bundle shared read-only by every relay call."""
    model: str
    system_prompt: str
    temperature: float
    max_tokens: int
    fallback_reply: str

@lru_cache(maxsize=1)
def default_params() -> GenerationParams:
    """Build the process-wide generation bundle from packaged resources."""
    cfg = load_generation_config()
    return GenerationParams(
        model=str(cfg["model"]),
        system_prompt=load_template(cfg.get("system_prompt_template", "chaos_persona.txt")).strip(),
        temperature=float(cfg.get("temperature", 1.4)),
        max_tokens=int(cfg.get("max_tokens", 70)),
        fallback_reply=str(cfg["fallback_reply"]),
    )
