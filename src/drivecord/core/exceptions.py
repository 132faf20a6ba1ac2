"""Custom exceptions for drivecord logic."""


class PayloadDecodeError(ValueError):
    """Raised when text carries no hidden payload or a malformed one."""


class MetadataFetchError(RuntimeError):
    """Base error for Drive metadata lookups.

    Fatal for the event being handled: a preview set with a file missing would
    be misleading, so the whole operation is aborted before touching Discord.
    """

    def __init__(self, file_id: str, detail: str = "") -> None:
        """Initialize the error with the Drive file id that failed."""
        self.file_id = file_id
        self.detail = detail
        message = f"Failed to fetch Drive metadata for {file_id!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DriveFileNotFoundError(MetadataFetchError):
    """The file does not exist or is invisible to the configured credentials."""


class DriveAccessDeniedError(MetadataFetchError):
    """The credentials were rejected or lack access to the file."""


class DriveTransientError(MetadataFetchError):
    """Network failure, server error or an unusable response."""
