"""Process bootstrap: load .env, configure logging, run uvicorn."""
from __future__ import annotations

import uvicorn
from dotenv import load_dotenv

from chaos_relay.common.logging_setup import setup_logging

def main() -> None:
    # .env must be loaded before settings are read.
    load_dotenv()

    from chaos_relay.common.config import get_settings
    from chaos_relay.serve.app import create_app

    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_config=None)

if __name__ == "__main__":
    main()
