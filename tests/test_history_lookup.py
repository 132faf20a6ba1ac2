from __future__ import annotations

import discord
import pytest

from drivecord.logic import correlator
from drivecord.logic.history import decode_correlation_id, find_preview_message

from ._fakes import BOT_USER_ID, FakeChannel, FakeMessage, FakeUser

SOURCE_ID = 500


def _preview(message_id: int, source_id: int, *, author_id: int = BOT_USER_ID) -> FakeMessage:
    title = correlator.append("Plan", str(source_id))
    return FakeMessage(
        id=message_id,
        author=FakeUser(author_id, bot=author_id == BOT_USER_ID),
        embeds=[discord.Embed(title=title, url="https://docs.google.com/document/d/x/edit")],
    )


@pytest.mark.asyncio
async def test_finds_bot_preview_for_source(channel: FakeChannel) -> None:
    target = _preview(502, SOURCE_ID)
    channel.add_history(
        FakeMessage(id=501, content="chatter"),
        target,
    )

    found = await find_preview_message(channel, SOURCE_ID, bot_user_id=BOT_USER_ID)

    assert found is target
    assert channel.history_calls == [
        {"limit": 5, "after": SOURCE_ID, "oldest_first": True},
    ]


@pytest.mark.asyncio
async def test_returns_none_when_bot_messages_belong_to_other_sources(
    channel: FakeChannel,
) -> None:
    channel.add_history(
        _preview(501, 400),
        FakeMessage(
            id=502,
            author=FakeUser(BOT_USER_ID, bot=True),
            embeds=[discord.Embed(title="No payload")],
        ),
        FakeMessage(id=503, author=FakeUser(BOT_USER_ID, bot=True)),
    )

    found = await find_preview_message(channel, SOURCE_ID, bot_user_id=BOT_USER_ID)

    assert found is None


@pytest.mark.asyncio
async def test_ignores_matching_payload_from_other_authors(channel: FakeChannel) -> None:
    channel.add_history(_preview(501, SOURCE_ID, author_id=42))

    found = await find_preview_message(channel, SOURCE_ID, bot_user_id=BOT_USER_ID)

    assert found is None


@pytest.mark.asyncio
async def test_scan_is_bounded_by_window(channel: FakeChannel) -> None:
    channel.add_history(
        *(FakeMessage(id=501 + offset, content="chatter") for offset in range(3)),
        _preview(510, SOURCE_ID),
    )

    assert (
        await find_preview_message(
            channel,
            SOURCE_ID,
            bot_user_id=BOT_USER_ID,
            limit=3,
        )
        is None
    )
    assert (
        await find_preview_message(
            channel,
            SOURCE_ID,
            bot_user_id=BOT_USER_ID,
            limit=4,
        )
        is not None
    )


def test_decode_correlation_id_handles_missing_or_malformed_titles() -> None:
    assert decode_correlation_id(FakeMessage(id=1)) is None
    assert decode_correlation_id(FakeMessage(id=1, embeds=[discord.Embed()])) is None
    broken = FakeMessage(
        id=1,
        embeds=[discord.Embed(title=f"Plan{correlator.SEPARATOR}x")],
    )
    assert decode_correlation_id(broken) is None
