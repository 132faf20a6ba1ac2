from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import discord

from drivecord.core.exceptions import DriveFileNotFoundError
from drivecord.core.models import FileMetadata

BOT_USER_ID = 999
UNKNOWN_MESSAGE = 10008


def make_not_found(code: int = UNKNOWN_MESSAGE) -> discord.NotFound:
    response = SimpleNamespace(status=404, reason="Not Found")
    return discord.NotFound(response, {"code": code, "message": "Unknown"})


def drive_embed(file_id: str, title: str = "Doc") -> discord.Embed:
    return discord.Embed(
        title=title,
        url=f"https://docs.google.com/document/d/{file_id}/edit",
    )


def make_metadata(
    name: str,
    *,
    mime_type: str = "application/vnd.google-apps.document",
    modified_time: str = "2024-01-02T03:04:05.000Z",
) -> FileMetadata:
    return FileMetadata(
        name=name,
        web_view_link=f"https://docs.google.com/document/d/{name}/edit",
        mime_type=mime_type,
        modified_time=modified_time,
    )


@dataclass(slots=True)
class FakeUser:
    id: int
    bot: bool = False


@dataclass(slots=True)
class FakeMessage:
    id: int
    content: str = ""
    author: FakeUser = field(default_factory=lambda: FakeUser(1234))
    channel: Any = None
    embeds: list[discord.Embed] = field(default_factory=list)
    guild: Any = field(default_factory=lambda: SimpleNamespace(id=1))
    edit_calls: list[dict[str, Any]] = field(default_factory=list)
    deleted: bool = False
    edit_error: BaseException | None = None
    delete_error: BaseException | None = None

    async def edit(self, **kwargs: Any) -> FakeMessage:
        if self.edit_error is not None:
            raise self.edit_error
        self.edit_calls.append(kwargs)
        if "embeds" in kwargs:
            self.embeds = list(kwargs["embeds"])
        return self

    async def delete(self) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted = True


class FakeChannel:
    """Channel double recording sends and serving scripted fetches."""

    def __init__(
        self,
        channel_id: int = 123,
        call_log: list[str] | None = None,
    ) -> None:
        self.id = channel_id
        self.call_log = call_log if call_log is not None else []
        self.history_messages: list[FakeMessage] = []
        self.sent: list[FakeMessage] = []
        self.typing_calls = 0
        self.fetch_calls = 0
        self.history_calls: list[dict[str, Any]] = []
        self._fetch_script: list[FakeMessage | BaseException] = []
        self._next_id = 10_000

    def script_fetches(self, *results: FakeMessage | BaseException) -> None:
        self._fetch_script = list(results)

    def add_history(self, *messages: FakeMessage) -> None:
        for message in messages:
            message.channel = self
            self.history_messages.append(message)

    async def _send_typing(self) -> None:
        self.typing_calls += 1
        self.call_log.append("typing")

    def typing(self) -> Any:
        return self._send_typing()

    async def send(self, *, embeds: Iterable[discord.Embed]) -> FakeMessage:
        self.call_log.append("send")
        self._next_id += 1
        message = FakeMessage(
            id=self._next_id,
            author=FakeUser(BOT_USER_ID, bot=True),
            channel=self,
            embeds=list(embeds),
        )
        self.sent.append(message)
        self.history_messages.append(message)
        return message

    async def fetch_message(self, message_id: int) -> FakeMessage:
        self.fetch_calls += 1
        if not self._fetch_script:
            raise make_not_found()
        result = (
            self._fetch_script.pop(0)
            if len(self._fetch_script) > 1
            else self._fetch_script[0]
        )
        if isinstance(result, BaseException):
            raise result
        assert result.id == message_id
        return result

    def history(
        self,
        *,
        limit: int,
        after: discord.abc.Snowflake,
        oldest_first: bool = True,
    ) -> AsyncIterator[FakeMessage]:
        self.history_calls.append(
            {"limit": limit, "after": after.id, "oldest_first": oldest_first},
        )
        window = sorted(
            (message for message in self.history_messages if message.id > after.id),
            key=lambda message: message.id,
        )[:limit]

        async def _gen() -> AsyncIterator[FakeMessage]:
            for message in window:
                yield message

        return _gen()


class FakeDrive:
    """Metadata source backed by a dict, recording requested ids."""

    def __init__(
        self,
        files: dict[str, FileMetadata] | None = None,
        call_log: list[str] | None = None,
    ) -> None:
        self.files = files or {}
        self.requested: list[str] = []
        self.call_log = call_log if call_log is not None else []

    async def fetch_all(self, file_ids: Iterable[str]) -> list[FileMetadata]:
        self.call_log.append("drive_fetch")
        results = []
        for file_id in file_ids:
            self.requested.append(file_id)
            if file_id not in self.files:
                raise DriveFileNotFoundError(file_id, "HTTP 404")
            results.append(self.files[file_id])
        return results
