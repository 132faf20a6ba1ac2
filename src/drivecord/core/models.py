"""Data models for drivecord."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class FileReference:
    """A Google Drive file or folder id found in message text."""

    file_id: str


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Display metadata for one Drive file, fetched fresh per message."""

    name: str
    web_view_link: str
    mime_type: str
    modified_time: str

    @property
    def modified_at(self) -> datetime:
        """Parse the RFC 3339 `modifiedTime` returned by the Drive API."""
        return datetime.fromisoformat(self.modified_time)
