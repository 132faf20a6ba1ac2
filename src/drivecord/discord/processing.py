"""Discord message event processing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import discord

from drivecord.core.config import ReconcileSettings
from drivecord.core.error_handling import (
    EVENT_HANDLER_EXCEPTIONS,
    build_event_context,
    log_exception,
)
from drivecord.logic.reconcile import (
    PreviewReconciler,
    ReconcileResult,
    ReconcileState,
)
from drivecord.services.drive import DriveClient, DriveCredentials

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx
    from discord.abc import Messageable

logger = logging.getLogger(__name__)


def build_reconciler(
    config: Mapping[str, Any],
    *,
    http_client: httpx.AsyncClient,
    bot_user_id: int,
) -> PreviewReconciler:
    """Create a reconciler from the current config.

    Built per event so edits to `config.yaml` apply without a restart.
    """
    settings = ReconcileSettings.from_config(config)
    drive_client = DriveClient(
        http_client,
        DriveCredentials.from_config(config),
        retries=settings.drive_request_retries,
    )
    return PreviewReconciler(drive_client, bot_user_id=bot_user_id, settings=settings)


def should_process(
    message: discord.Message,
    *,
    bot_user_id: int,
    config: Mapping[str, Any],
) -> bool:
    """Decide whether a message is eligible for Drive previews."""
    if message.author.id == bot_user_id:
        return False
    if message.author.bot and config.get("ignore_bots", True):
        return False
    if message.guild is None and not config.get("allow_dms", False):
        return False
    return True


def edit_changed_content(payload: discord.RawMessageUpdateEvent) -> bool:
    """Return True unless the edit is known to leave the text untouched.

    Discord also sends edit events when it attaches link embeds or when they
    get suppressed. Without a cached copy there is nothing to compare, so the
    edit is treated as a content change.
    """
    cached = payload.cached_message
    if cached is None:
        return True
    return cached.content != payload.message.content


async def resolve_channel(
    client: discord.Client,
    channel_id: int,
) -> Messageable | None:
    """Return a messageable channel by id, fetching it if it is not cached."""
    channel = client.get_channel(channel_id)
    if channel is None:
        try:
            channel = await client.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden):
            logger.warning("Channel %s is not accessible", channel_id)
            return None

    if not isinstance(channel, discord.abc.Messageable):
        return None
    return channel


def _log_result(event: str, message_id: int, result: ReconcileResult) -> None:
    if result.state is ReconcileState.NO_LINKS:
        return
    logger.info(
        "%s %s: %s Drive file(s), preview %s (%s), native embeds %s",
        event,
        message_id,
        len(result.file_ids),
        result.preview_message.id if result.preview_message else None,
        "edited" if result.edited_existing else "posted",
        result.state.value,
    )


async def process_message(
    message: discord.Message,
    *,
    reconciler: PreviewReconciler,
    is_new: bool,
) -> ReconcileResult | None:
    """Run the reconciler for a new or edited message.

    Failures are logged with message context and swallowed here, at the
    event boundary; nothing is posted to the channel about them.
    """
    event = "message" if is_new else "message_edit"
    try:
        result = await reconciler.reconcile(message, is_new=is_new)
    except EVENT_HANDLER_EXCEPTIONS as exc:
        log_exception(
            logger=logger,
            message="Failed to preview Drive links",
            error=exc,
            context=build_event_context(
                event=event,
                message_id=message.id,
                channel_id=message.channel.id,
                author_id=message.author.id,
            ),
        )
        return None

    _log_result(event, message.id, result)
    return result


async def process_deletions(
    channel: Messageable,
    source_message_ids: set[int],
    *,
    reconciler: PreviewReconciler,
    channel_id: int,
    event: str = "message_delete",
) -> int:
    """Remove the previews of deleted source messages."""
    try:
        removed = await reconciler.remove_previews(channel, source_message_ids)
    except EVENT_HANDLER_EXCEPTIONS as exc:
        log_exception(
            logger=logger,
            message="Failed to remove Drive previews",
            error=exc,
            context=build_event_context(
                event=event,
                channel_id=channel_id,
                message_ids=tuple(sorted(source_message_ids)),
            ),
        )
        return 0

    if removed:
        logger.debug("%s: removed %s preview(s)", event, removed)
    return removed


async def handle_message_delete(
    payload: discord.RawMessageDeleteEvent,
    *,
    client: discord.Client,
    reconciler: PreviewReconciler,
) -> int:
    """Remove the preview of a single deleted message."""
    # The bot deleting its own preview needs no follow-up
    cached = payload.cached_message
    bot_user = client.user
    if cached is not None and bot_user is not None and cached.author.id == bot_user.id:
        return 0

    channel = await resolve_channel(client, payload.channel_id)
    if channel is None:
        return 0
    return await process_deletions(
        channel,
        {payload.message_id},
        reconciler=reconciler,
        channel_id=payload.channel_id,
    )


async def handle_bulk_message_delete(
    payload: discord.RawBulkMessageDeleteEvent,
    *,
    client: discord.Client,
    reconciler: PreviewReconciler,
) -> int:
    """Remove the previews of messages deleted in bulk."""
    channel = await resolve_channel(client, payload.channel_id)
    if channel is None:
        return 0
    return await process_deletions(
        channel,
        set(payload.message_ids),
        reconciler=reconciler,
        channel_id=payload.channel_id,
        event="bulk_message_delete",
    )
