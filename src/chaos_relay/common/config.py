"""Process settings from environment. Read once; constant for the process lifetime."""
from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_BASE_URL = "https://api.groq.com/openai"

def _parse_origins(raw: str) -> list[str]:
    """Comma-separated origins, or * for all."""
    raw = raw.strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]

@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str
    allowed_origins: tuple[str, ...]
    backend_url: str
    timeout: float
    host: str
    port: int
    log_level: str

    @property
    def any_origin(self) -> bool:
        return "*" in self.allowed_origins

    def origin_allowed(self, origin: str | None) -> bool:
        """True if a WebSocket handshake from `origin` may proceed."""
        if self.any_origin:
            return True
        return origin is not None and origin in self.allowed_origins

def load_settings() -> Settings:
    """Build settings from the current environment (load .env before calling)."""
    try:
        timeout = float(os.getenv("COMPLETION_TIMEOUT", "30"))
    except ValueError:
        timeout = 30.0
    return Settings(
        api_key=os.getenv("GROQ_API_KEY", "").strip(),
        base_url=(os.getenv("GROQ_BASE_URL", "") or DEFAULT_BASE_URL).strip().rstrip("/"),
        allowed_origins=tuple(_parse_origins(os.getenv("ALLOWED_ORIGINS", "*"))),
        backend_url=(os.getenv("BACKEND_URL", "") or "http://localhost:3000").strip(),
        timeout=max(1.0, timeout),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )

@lru_cache
def get_settings() -> Settings:
    return load_settings()
