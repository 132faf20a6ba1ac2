"""Find the bot's preview message for a source message in channel history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from drivecord.core.config import DEFAULT_HISTORY_WINDOW
from drivecord.core.exceptions import PayloadDecodeError
from drivecord.logic import correlator

if TYPE_CHECKING:
    from discord.abc import Messageable

logger = logging.getLogger(__name__)


def decode_correlation_id(message: discord.Message) -> str | None:
    """Return the source message id hidden in `message`'s first embed title."""
    if not message.embeds:
        return None

    title = message.embeds[0].title
    if not title:
        return None

    try:
        return correlator.decode_appended(title)
    except PayloadDecodeError:
        return None


async def find_preview_message(
    channel: Messageable,
    source_message_id: int,
    *,
    bot_user_id: int,
    limit: int = DEFAULT_HISTORY_WINDOW,
) -> discord.Message | None:
    """Scan the messages right after the source for its preview message.

    The bot always replies shortly after the source, so only `limit` messages
    are scanned. Returns the first bot-authored message whose hidden id
    matches `source_message_id`, or None.
    """
    expected_id = str(source_message_id)
    after = discord.Object(id=source_message_id)
    async for message in channel.history(limit=limit, after=after, oldest_first=True):
        if message.author.id != bot_user_id:
            continue
        if decode_correlation_id(message) == expected_id:
            return message

    logger.debug(
        "No preview message found for %s in the next %s messages",
        source_message_id,
        limit,
    )
    return None
