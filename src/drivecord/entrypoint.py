"""Entrypoint module for starting and stopping the bot."""

import asyncio
import contextlib
import importlib

import discord
import httpx

from drivecord.globals import config, discord_bot, httpx_client


async def shutdown() -> None:
    """Best-effort shutdown of long-lived resources.

    This is safe to call multiple times.
    """
    if not discord_bot.is_closed():
        with contextlib.suppress(discord.DiscordException, OSError):
            await discord_bot.close()
            # Let discord.py keep-alive threads exit before the loop closes.
            await asyncio.sleep(0.25)

    if httpx_client is not None and not httpx_client.is_closed:
        with contextlib.suppress(httpx.HTTPError, OSError):
            await httpx_client.aclose()


async def main() -> None:
    """Register event handlers and run the Discord client."""
    importlib.import_module("drivecord.discord.events")

    try:
        await discord_bot.start(config["bot_token"])
    finally:
        # Ctrl+C typically cancels the main task; shield shutdown so Discord closes
        # before the event loop is closed.
        with contextlib.suppress(discord.DiscordException, httpx.HTTPError, OSError):
            await asyncio.shield(shutdown())
