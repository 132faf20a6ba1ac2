"""Configuration loading and constants for drivecord.

This package exposes the split configuration modules as a single interface.
"""

from drivecord.core.config.constants import (
    DEFAULT_DRIVE_REQUEST_RETRIES,
    DEFAULT_HISTORY_WINDOW,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_BACKOFF_SECONDS,
    DEFAULT_STATUS_MESSAGE,
    DRIVE_FILES_ENDPOINT,
    DRIVE_HOSTS,
    DRIVE_METADATA_FIELDS,
    EMBED_TITLE_LIMIT,
    FILE_ID_MARKERS,
    MESSAGE_EMBED_COUNT_LIMIT,
    UNKNOWN_MESSAGE_ERROR_CODE,
)
from drivecord.core.config.http import (
    DEFAULT_USER_AGENT,
    HttpxClientOptions,
    get_or_create_httpx_client,
)
from drivecord.core.config.manager import (
    _CONFIG_STATE,
    CONFIG_CACHE_TTL,
    ConfigFileEmptyError,
    ConfigFileNotFoundError,
    ConfigValidationError,
    _resolve_config_path,
    clear_config_cache,
    get_config,
    validate_config,
)
from drivecord.core.config.settings import ReconcileSettings

__all__ = [
    "CONFIG_CACHE_TTL",
    "DEFAULT_DRIVE_REQUEST_RETRIES",
    "DEFAULT_HISTORY_WINDOW",
    "DEFAULT_POLL_ATTEMPTS",
    "DEFAULT_POLL_BACKOFF_SECONDS",
    "DEFAULT_STATUS_MESSAGE",
    "DEFAULT_USER_AGENT",
    "DRIVE_FILES_ENDPOINT",
    "DRIVE_HOSTS",
    "DRIVE_METADATA_FIELDS",
    "EMBED_TITLE_LIMIT",
    "FILE_ID_MARKERS",
    "MESSAGE_EMBED_COUNT_LIMIT",
    "UNKNOWN_MESSAGE_ERROR_CODE",
    "_CONFIG_STATE",
    "ConfigFileEmptyError",
    "ConfigFileNotFoundError",
    "ConfigValidationError",
    "HttpxClientOptions",
    "ReconcileSettings",
    "_resolve_config_path",
    "clear_config_cache",
    "get_config",
    "get_or_create_httpx_client",
    "validate_config",
]
