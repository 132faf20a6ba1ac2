"""Turn Drive metadata into preview cards for the bot's reply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord

from drivecord.core.config import EMBED_TITLE_LIMIT
from drivecord.logic import correlator
from drivecord.logic.file_types import FileType, classify

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from drivecord.core.models import FileMetadata

_ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class PreviewCard:
    """One embed of the bot's preview message."""

    title: str
    url: str
    file_type: FileType
    timestamp: datetime

    @property
    def color(self) -> discord.Color:
        return self.file_type.color

    def to_embed(self) -> discord.Embed:
        """Render the card as a Discord embed."""
        return discord.Embed(
            title=self.title,
            url=self.url,
            color=self.color,
            timestamp=self.timestamp,
        )


def _truncate_title(name: str, limit: int) -> str:
    """Clamp a visible title to `limit` characters."""
    if len(name) <= limit:
        return name
    if limit <= len(_ELLIPSIS):
        return name[:limit]
    return f"{name[: limit - len(_ELLIPSIS)]}{_ELLIPSIS}"


def correlated_title(name: str, source_message_id: str) -> str:
    """Return `name` carrying `source_message_id` as a hidden payload.

    The visible part is shortened first so the payload always fits in
    Discord's title limit.
    """
    suffix = correlator.append("", source_message_id)
    visible = _truncate_title(name, max(EMBED_TITLE_LIMIT - len(suffix), 0))
    return f"{visible}{suffix}"


def build_cards(
    source_message_id: str,
    metadata: Sequence[FileMetadata],
) -> list[PreviewCard]:
    """Build one card per metadata entry, keeping the input order.

    Only the first card's title carries the source message id.
    """
    cards: list[PreviewCard] = []
    for index, file in enumerate(metadata):
        if index == 0:
            title = correlated_title(file.name, source_message_id)
        else:
            title = _truncate_title(file.name, EMBED_TITLE_LIMIT)
        cards.append(
            PreviewCard(
                title=title,
                url=file.web_view_link,
                file_type=classify(file.mime_type),
                timestamp=file.modified_at,
            ),
        )
    return cards


def build_embeds(cards: Sequence[PreviewCard]) -> list[discord.Embed]:
    """Render cards as embeds, in order."""
    return [card.to_embed() for card in cards]
