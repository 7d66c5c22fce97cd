#!/usr/bin/env python3
"""
Startup script for the calendar notes service.

Runs one sync, registers a Google Calendar watch, then serves the webhook.
"""
import argparse
import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import uvicorn
from fastapi import FastAPI

from .config import Settings, get_settings
from .context import AppContext
from .logging_conf import configure_logging
from .services.sync_service import register_watch, run_sync
from .webhook_server import create_app

logger = logging.getLogger(__name__)


async def serve_app(app: FastAPI, settings: Settings) -> None:
    config = uvicorn.Config(
        app,
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_config=None,
        log_level=settings.LOG_LEVEL.lower(),
    )
    await uvicorn.Server(config).serve()


async def bootstrap(context: AppContext,
                    serve: Optional[Callable[[FastAPI, Settings], Awaitable[None]]] = None) -> None:
    """Initial sync, then watch registration, then the listener.

    The first two steps log their own failures; the listener always starts.
    """
    serve = serve or serve_app

    await run_sync(context, trigger="startup")
    await register_watch(context)

    app = create_app(context)
    settings = context.settings
    logger.info(f"🚀 Webhook server listening on {settings.SERVER_HOST}:{settings.SERVER_PORT}")
    await serve(app, settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync Google Calendar events into daily markdown notes.")
    parser.add_argument("--vault-dir", type=Path, help="Directory receiving the YYYY-MM-DD.md notes")
    parser.add_argument("--callback-url", help="Public URL Google calls for push notifications")
    parser.add_argument("--port", type=int, help="Port for the webhook listener")
    parser.add_argument("--log-level", help="Logging level (default from LOG_LEVEL)")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.vault_dir is not None:
        overrides["VAULT_DIR"] = args.vault_dir
    if args.callback_url is not None:
        overrides["CALLBACK_URL"] = args.callback_url
    if args.port is not None:
        overrides["SERVER_PORT"] = args.port
    if args.log_level is not None:
        overrides["LOG_LEVEL"] = args.log_level
    return settings.model_copy(update=overrides) if overrides else settings


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    context = AppContext.from_settings(settings)
    asyncio.run(bootstrap(context))


if __name__ == "__main__":
    main()
