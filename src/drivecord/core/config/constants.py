"""Constant definitions for drivecord."""

# Google Drive link recognition
DRIVE_HOSTS = frozenset({"drive.google.com", "docs.google.com"})
FILE_ID_MARKERS = frozenset({"d", "folders"})

# Native embed polling
DEFAULT_POLL_ATTEMPTS = 3
DEFAULT_POLL_BACKOFF_SECONDS = 3.0

# History correlation lookup
DEFAULT_HISTORY_WINDOW = 5

# Drive API
DRIVE_FILES_ENDPOINT = "https://www.googleapis.com/drive/v3/files"
DRIVE_METADATA_FIELDS = "name,webViewLink,mimeType,modifiedTime"
DEFAULT_DRIVE_REQUEST_RETRIES = 2

# Discord limit constants
EMBED_TITLE_LIMIT = 256
MESSAGE_EMBED_COUNT_LIMIT = 10

# Discord JSON error code for "Unknown Message"
UNKNOWN_MESSAGE_ERROR_CODE = 10008

DEFAULT_STATUS_MESSAGE = "Google Drive"
