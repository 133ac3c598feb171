"""FastAPI surfaces over the message relay.

Endpoints:
- GET  /health
- POST /ai/chat  { "message": "..." }  ->  { "response": "..." }
- WS   /ws       {"event": "message", "data": {"message": "..."}}
                 -> {"event": "ai-response", "data": {"response": "..."}}
                 |  {"event": "error", "data": {"message": "Failed to process message"}}
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from chaos_relay.common.config import Settings, get_settings
from chaos_relay.common.schema import ChatRequest, ChatResponse, SocketEvent, default_params
from chaos_relay.core.completion import CompletionClient
from chaos_relay.core.errors import CompletionError
from chaos_relay.core.relay import Relay

LOGGER = logging.getLogger("chaos_relay.serve.app")

INBOUND_EVENT = "message"
RESPONSE_EVENT = "ai-response"
ERROR_EVENT = "error"
SOCKET_ERROR_MESSAGE = "Failed to process message"
UPSTREAM_ERROR_DETAIL = "Upstream completion error"

def _error_event() -> SocketEvent:
    return SocketEvent(event=ERROR_EVENT, data={"message": SOCKET_ERROR_MESSAGE})

def _frame_text(message: dict[str, Any]) -> str | None:
    """Text of a `websocket.receive` message; binary frames must be UTF-8."""
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        LOGGER.warning("Undecodable binary socket frame")
        return None

async def handle_event(relay: Relay, raw: str) -> SocketEvent | None:
    """
    Turn one inbound socket frame into the event to emit back.

    Failures of any kind become the generic error event; the detail is
    logged here and never sent to the client. Unknown event names yield None.
    """
    try:
        event = SocketEvent.model_validate_json(raw)
    except ValidationError:
        LOGGER.warning("Malformed socket frame")
        return _error_event()

    if event.event != INBOUND_EVENT:
        LOGGER.debug("Ignoring socket event %r", event.event)
        return None

    try:
        req = ChatRequest.model_validate(event.data)
        resp = await relay.relay(req.message)
    except Exception:
        LOGGER.exception("Failed to process socket message")
        return _error_event()
    return SocketEvent(event=RESPONSE_EVENT, data=resp.model_dump())

def create_app(relay: Relay | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        relay: Pre-built relay (tests). When omitted, the lifespan opens one
            shared httpx client and builds the relay over it.
        settings: Process settings; defaults to the environment.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http = None
        if app.state.relay is None:
            http = httpx.AsyncClient(timeout=settings.timeout)
            app.state.relay = Relay(CompletionClient(http, settings.base_url, settings.api_key))
        if not settings.api_key:
            LOGGER.warning("GROQ_API_KEY is not set; completion calls will be rejected upstream")
        LOGGER.info("WebSocket gateway initialized. Backend URL: %s", settings.backend_url)
        try:
            yield
        finally:
            if http is not None:
                await http.aclose()

    app = FastAPI(title="Chaos Relay", version="0.1.0", lifespan=lifespan)
    app.state.relay = relay
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(CompletionError)
    async def _completion_failed(request: Request, exc: CompletionError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": UPSTREAM_ERROR_DETAIL})

    @app.get("/health")
    def health(request: Request) -> dict[str, str]:
        r = request.app.state.relay
        params = r.params if r is not None else default_params()
        return {"status": "ok", "model": params.model}

    @app.post("/ai/chat", response_model=ChatResponse)
    async def chat(body: ChatRequest, request: Request) -> ChatResponse:
        return await request.app.state.relay.relay(body.message)

    @app.websocket("/ws")
    async def socket(ws: WebSocket) -> None:
        origin = ws.headers.get("origin")
        if not settings.origin_allowed(origin):
            LOGGER.warning("Rejected socket from origin %s", origin)
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await ws.accept()
        r: Relay = ws.app.state.relay
        # Frames on one connection are handled in order.
        try:
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = _frame_text(message)
                out = _error_event() if raw is None else await handle_event(r, raw)
                if out is not None:
                    await ws.send_text(out.model_dump_json())
        except WebSocketDisconnect:
            pass
        LOGGER.debug("Socket closed")

    return app
