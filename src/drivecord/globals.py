"""Global state and shared clients."""

import logging

import discord
import httpx

from drivecord.core.config import (
    DEFAULT_STATUS_MESSAGE,
    HttpxClientOptions,
    get_config,
    get_or_create_httpx_client,
)

config = get_config()

# Configure logging
logging.basicConfig(
    level=str(config.get("log_level") or "INFO").upper(),
    format="%(asctime)s %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize clients
intents = discord.Intents.default()
intents.message_content = True
status_message = (config.get("status_message") or DEFAULT_STATUS_MESSAGE)[:128]
activity = discord.Activity(type=discord.ActivityType.watching, name=status_message)
discord_bot = discord.Client(
    intents=intents,
    activity=activity,
    allowed_mentions=discord.AllowedMentions.none(),
)

_httpx_client_holder: list[httpx.AsyncClient | None] = []
proxy_url = config.get("proxy_url") or None
httpx_client = get_or_create_httpx_client(
    _httpx_client_holder,
    options=HttpxClientOptions(proxy_url=proxy_url),
)
