"""Relay one message from the command line and print the reply."""
from __future__ import annotations
import argparse
import asyncio
import sys

import httpx
from dotenv import load_dotenv

from chaos_relay.common.config import get_settings
from chaos_relay.common.logging_setup import setup_logging
from chaos_relay.core.completion import CompletionClient
from chaos_relay.core.errors import CompletionError
from chaos_relay.core.relay import Relay

async def ask(text: str) -> str:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.timeout) as http:
        relay = Relay(CompletionClient(http, settings.base_url, settings.api_key))
        resp = await relay.relay(text)
    return resp.response

def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description="Send one message through the chaos relay")
    ap.add_argument("--text", required=True, help="User message")
    ap.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    args = ap.parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    try:
        reply = asyncio.run(ask(args.text))
    except CompletionError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(reply)
    return 0

if __name__ == "__main__":
    sys.exit(main())
