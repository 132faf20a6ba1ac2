"""Embed colors for Google Workspace file types."""

from __future__ import annotations

from enum import Enum

import discord

# https://developers.google.com/drive/api/guides/mime-types
_GOOGLE_APPS_MIME_PREFIX = "application/vnd.google-apps."


class FileType(Enum):
    """Google file families the bot colors differently."""

    DOCS = ("document", 0x4285F4)
    SHEETS = ("spreadsheet", 0x0F9D58)
    SLIDES = ("presentation", 0xF4B400)
    FORMS = ("form", 0x7627BB)
    OTHER = ("other", 0xE3E5E8)

    def __init__(self, category: str, color_value: int) -> None:
        self.category = category
        self.color_value = color_value

    @property
    def mime_type(self) -> str | None:
        """Google Apps MIME type for this family, None for `OTHER`."""
        if self is FileType.OTHER:
            return None
        return f"{_GOOGLE_APPS_MIME_PREFIX}{self.category}"

    @property
    def color(self) -> discord.Color:
        return discord.Color(self.color_value)


_BY_MIME_TYPE = {
    file_type.mime_type: file_type
    for file_type in FileType
    if file_type.mime_type is not None
}


def classify(mime_type: str | None) -> FileType:
    """Map a Drive MIME type to its `FileType`, `OTHER` when unrecognized."""
    if not mime_type:
        return FileType.OTHER
    return _BY_MIME_TYPE.get(mime_type, FileType.OTHER)
