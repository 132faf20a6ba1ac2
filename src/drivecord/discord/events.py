"""Discord event handlers for drivecord."""

import logging
from typing import Any

import discord

from drivecord.core.config import get_config
from drivecord.core.error_handling import log_discord_event_error
from drivecord.discord.processing import (
    build_reconciler,
    edit_changed_content,
    handle_bulk_message_delete,
    handle_message_delete,
    process_message,
    should_process,
)
from drivecord.globals import discord_bot, httpx_client
from drivecord.logic.reconcile import PreviewReconciler

logger = logging.getLogger(__name__)


def current_reconciler(config: dict[str, Any]) -> PreviewReconciler:
    return build_reconciler(
        config,
        http_client=httpx_client,
        bot_user_id=discord_bot.user.id,
    )


# =============================================================================
# Event Handlers
# =============================================================================


@discord_bot.event
async def on_ready() -> None:
    """Log readiness and the invite link."""
    if not discord_bot.user:
        return

    client_id = discord_bot.user.id
    # View Channels, Send Messages, Embed Links, Read Message History,
    # Manage Messages (needed to suppress embeds on other users' messages)
    invite_url = (
        "https://discord.com/oauth2/authorize?client_id="
        f"{client_id}&permissions=93184&scope=bot"
    )
    logger.info("\n\nBOT INVITE URL:\n%s\n", invite_url)


@discord_bot.event
async def on_message(new_msg: discord.Message) -> None:
    """Preview Drive links in a newly sent message."""
    config = get_config()
    if not should_process(
        new_msg,
        bot_user_id=discord_bot.user.id,
        config=config,
    ):
        return
    await process_message(
        new_msg,
        reconciler=current_reconciler(config),
        is_new=True,
    )


@discord_bot.event
async def on_raw_message_edit(payload: discord.RawMessageUpdateEvent) -> None:
    """Refresh the preview when a message's text changes."""
    config = get_config()
    message = payload.message
    if not should_process(
        message,
        bot_user_id=discord_bot.user.id,
        config=config,
    ):
        return
    if not edit_changed_content(payload):
        return
    await process_message(
        message,
        reconciler=current_reconciler(config),
        is_new=False,
    )


@discord_bot.event
async def on_raw_message_delete(payload: discord.RawMessageDeleteEvent) -> None:
    """Remove the preview of a deleted message."""
    await handle_message_delete(
        payload,
        client=discord_bot,
        reconciler=current_reconciler(get_config()),
    )


@discord_bot.event
async def on_raw_bulk_message_delete(
    payload: discord.RawBulkMessageDeleteEvent,
) -> None:
    """Remove the previews of messages deleted in bulk."""
    await handle_bulk_message_delete(
        payload,
        client=discord_bot,
        reconciler=current_reconciler(get_config()),
    )


@discord_bot.event
async def on_error(event_method: str, *args: object, **kwargs: object) -> None:
    """Handle uncaught Discord event exceptions in one place."""
    log_discord_event_error(
        logger=logger,
        event_name=event_method,
        args=args,
        kwargs=kwargs,
    )
