"""Post Drive previews and keep Discord's own link embeds out of the way.

Discord attaches its native link embeds to a message a few seconds after it is
sent. The reconciler posts (or edits) the bot's preview message first, then
re-fetches the source a bounded number of times until native embeds show up,
and suppresses them once if every one of them is a Drive link the bot has
already rendered.

Two edits of the same source landing at nearly the same time can both miss the
history lookup and both post a preview. Nothing is persisted between events, so
that duplicate is accepted rather than guarded with a lock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

import discord

from drivecord.core.config import (
    MESSAGE_EMBED_COUNT_LIMIT,
    UNKNOWN_MESSAGE_ERROR_CODE,
    ReconcileSettings,
)
from drivecord.logic.file_ids import extract_embed_file_ids, extract_file_ids
from drivecord.logic.history import find_preview_message
from drivecord.logic.previews import build_cards, build_embeds

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from discord.abc import Messageable

    from drivecord.core.models import FileMetadata

logger = logging.getLogger(__name__)


class MetadataSource(Protocol):
    """Anything that can fetch Drive metadata for a list of file ids."""

    async def fetch_all(self, file_ids: Iterable[str]) -> list[FileMetadata]:
        """Fetch metadata in order, raising on the first failure."""
        ...


class ReconcileState(Enum):
    """Stages of handling one new or edited source message."""

    NO_LINKS = "no_links"
    FETCHING = "fetching"
    POSTED_OR_EDITED = "posted_or_edited"
    POLLING = "polling"
    SUPPRESSED = "suppressed"
    GAVE_UP = "gave_up"
    MESSAGE_GONE = "message_gone"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        ReconcileState.NO_LINKS,
        ReconcileState.SUPPRESSED,
        ReconcileState.GAVE_UP,
        ReconcileState.MESSAGE_GONE,
    },
)


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of `PreviewReconciler.reconcile`."""

    state: ReconcileState
    file_ids: list[str] = field(default_factory=list)
    preview_message: discord.Message | None = None
    edited_existing: bool = False


def is_unknown_message(error: BaseException) -> bool:
    """Return True when a Discord error means the message no longer exists."""
    return (
        isinstance(error, discord.NotFound)
        and error.code == UNKNOWN_MESSAGE_ERROR_CODE
    )


def native_embeds_are_redundant(
    embeds: Sequence[discord.Embed],
    rendered_ids: Iterable[str],
) -> bool:
    """Return True when every native embed is a Drive link the bot rendered."""
    embed_ids = extract_embed_file_ids(embed.url for embed in embeds)
    if len(embed_ids) != len(embeds):
        return False
    return set(embed_ids).issubset(rendered_ids)


class PreviewReconciler:
    """Runs the preview pipeline for message events in one Discord client."""

    def __init__(
        self,
        metadata_source: MetadataSource,
        *,
        bot_user_id: int,
        settings: ReconcileSettings | None = None,
    ) -> None:
        self._metadata_source = metadata_source
        self._bot_user_id = bot_user_id
        self._settings = settings or ReconcileSettings()

    @property
    def settings(self) -> ReconcileSettings:
        return self._settings

    async def reconcile(
        self,
        source: discord.Message,
        *,
        is_new: bool,
    ) -> ReconcileResult:
        """Post or refresh the preview for `source`, then handle native embeds.

        An edited source reuses the preview found in history. Otherwise the
        typing indicator goes up before the Drive requests start. Metadata
        errors propagate before any message is sent or edited.
        """
        file_ids = [reference.file_id for reference in extract_file_ids(source.content)]
        if not file_ids:
            return ReconcileResult(ReconcileState.NO_LINKS)

        if len(file_ids) > MESSAGE_EMBED_COUNT_LIMIT:
            logger.info(
                "Message %s links %s Drive files; previewing the first %s",
                source.id,
                len(file_ids),
                MESSAGE_EMBED_COUNT_LIMIT,
            )
            file_ids = file_ids[:MESSAGE_EMBED_COUNT_LIMIT]

        existing = None
        if not is_new:
            existing = await self.find_preview(source.channel, source.id)
        if existing is None:
            await source.channel.typing()

        logger.debug("Message %s: %s", source.id, ReconcileState.FETCHING.value)
        metadata = await self._metadata_source.fetch_all(file_ids)
        embeds = build_embeds(build_cards(str(source.id), metadata))

        preview_message, edited_existing = await self._publish(
            source,
            embeds,
            existing=existing,
        )
        logger.debug(
            "Message %s: %s (preview %s)",
            source.id,
            ReconcileState.POSTED_OR_EDITED.value,
            preview_message.id,
        )

        state = await self._poll_and_suppress(source, file_ids)
        return ReconcileResult(
            state=state,
            file_ids=file_ids,
            preview_message=preview_message,
            edited_existing=edited_existing,
        )

    async def _publish(
        self,
        source: discord.Message,
        embeds: list[discord.Embed],
        *,
        existing: discord.Message | None,
    ) -> tuple[discord.Message, bool]:
        """Edit the existing preview if there is one, else post a new one."""
        if existing is not None:
            try:
                return await existing.edit(embeds=embeds), True
            except discord.NotFound as exc:
                if not is_unknown_message(exc):
                    raise
                logger.info(
                    "Preview %s vanished before it could be edited; reposting",
                    existing.id,
                )

        return await source.channel.send(embeds=embeds), False

    async def _poll_and_suppress(
        self,
        source: discord.Message,
        rendered_ids: list[str],
    ) -> ReconcileState:
        """Wait for native embeds on `source` and suppress them if redundant."""
        logger.debug("Message %s: %s", source.id, ReconcileState.POLLING.value)
        attempts = self._settings.poll_attempts
        for attempt in range(attempts):
            if attempt:
                await asyncio.sleep(self._settings.poll_backoff_seconds)

            try:
                latest = await source.channel.fetch_message(source.id)
            except discord.NotFound as exc:
                if not is_unknown_message(exc):
                    raise
                return ReconcileState.MESSAGE_GONE

            if not latest.embeds:
                logger.debug(
                    "No native embeds on %s yet (attempt %s/%s)",
                    source.id,
                    attempt + 1,
                    attempts,
                )
                continue

            if not native_embeds_are_redundant(latest.embeds, rendered_ids):
                return ReconcileState.GAVE_UP

            try:
                await latest.edit(suppress=True)
            except discord.NotFound as exc:
                if not is_unknown_message(exc):
                    raise
                return ReconcileState.MESSAGE_GONE
            return ReconcileState.SUPPRESSED

        return ReconcileState.GAVE_UP

    async def find_preview(
        self,
        channel: Messageable,
        source_message_id: int,
    ) -> discord.Message | None:
        """Locate the bot's preview message for `source_message_id`."""
        return await find_preview_message(
            channel,
            source_message_id,
            bot_user_id=self._bot_user_id,
            limit=self._settings.history_window,
        )

    async def remove_preview(
        self,
        channel: Messageable,
        source_message_id: int,
    ) -> bool:
        """Delete the preview of a deleted source message, if there is one."""
        preview = await self.find_preview(channel, source_message_id)
        if preview is None:
            return False

        try:
            await preview.delete()
        except discord.NotFound as exc:
            if not is_unknown_message(exc):
                raise
        logger.info(
            "Removed preview %s of deleted message %s",
            preview.id,
            source_message_id,
        )
        return True

    async def remove_previews(
        self,
        channel: Messageable,
        source_message_ids: Iterable[int],
    ) -> int:
        """Delete previews for a bulk delete; returns how many were removed."""
        removed = 0
        for source_message_id in sorted(source_message_ids):
            if await self.remove_preview(channel, source_message_id):
                removed += 1
        return removed
