#!/usr/bin/env python3
"""Main entry point: the Discord bot and the web remote in one event loop."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import TYPE_CHECKING

import discord
import uvicorn

from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates
from discord_music_remote.utils.logging import setup_logging

if TYPE_CHECKING:
    from discord_music_remote.config.settings import Settings
    from discord_music_remote.infrastructure.discord.bot import MusicRemoteBot

logger = logging.getLogger(__name__)


def build_server(app, settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        app,
        host=settings.web.host,
        port=settings.port,
        log_config=None,
        lifespan="off",
    )
    return uvicorn.Server(config)


async def serve(bot: MusicRemoteBot, server: uvicorn.Server, token: str) -> None:
    """Run bot and web server until either stops or a shutdown signal arrives."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:  # pragma: no cover - Windows
            pass

    async with bot:
        bot_task = asyncio.create_task(bot.start(token), name="discord-bot")
        web_task = asyncio.create_task(server.serve(), name="web-server")
        stop_task = asyncio.create_task(stop.wait(), name="shutdown-signal")

        done, _ = await asyncio.wait({bot_task, web_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if stop_task in done:
            logger.info(LogTemplates.APP_SHUTDOWN_SIGNAL)

        server.should_exit = True
        if not bot.is_closed():
            await bot.close()
        for task in (bot_task, web_task, stop_task):
            if not task.done():
                task.cancel()
        results = await asyncio.gather(bot_task, web_task, stop_task, return_exceptions=True)

    # Surface the first real failure (e.g. a bad token) to the caller.
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
            raise result


def main() -> int:
    from discord_music_remote.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    if not settings.has_discord_token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.APP_STARTING, settings.environment)

    from discord_music_remote.config.container import create_container
    from discord_music_remote.infrastructure.discord.bot import create_bot
    from discord_music_remote.infrastructure.web.app import create_app

    container = create_container(settings)
    bot = create_bot(container, settings)
    server = build_server(create_app(container), settings)
    logger.info(LogTemplates.APP_WEB_LISTENING, settings.base_url, settings.web.host, settings.port)

    try:
        asyncio.run(serve(bot, server, settings.discord_token.get_secret_value()))
        return 0
    except discord.LoginFailure:
        logger.error(LogTemplates.APP_LOGIN_FAILED)
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception(LogTemplates.APP_FATAL_ERROR)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
