"""Typed runtime settings derived from the YAML config."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from drivecord.core.config.constants import (
    DEFAULT_DRIVE_REQUEST_RETRIES,
    DEFAULT_HISTORY_WINDOW,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_BACKOFF_SECONDS,
)


def _coerce_int(raw_value: object, default: int, *, minimum: int) -> int:
    """Return `raw_value` as an int >= `minimum`, or `default` when unusable."""
    if raw_value is None or isinstance(raw_value, bool):
        return default

    try:
        value = int(raw_value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default

    if value < minimum:
        return default
    return value


def _coerce_seconds(raw_value: object, default: float) -> float:
    """Return `raw_value` as a finite float >= 0, or `default` when unusable."""
    if raw_value is None or isinstance(raw_value, bool):
        return default

    try:
        value = float(raw_value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default

    if not math.isfinite(value) or value < 0:
        return default
    return value


@dataclass(frozen=True, slots=True)
class ReconcileSettings:
    """Tunables for native embed polling and preview lookup.

    `poll_attempts` and `poll_backoff_seconds` encode how long Discord usually
    takes to attach its own link embeds; they are the main knob for missed
    suppressions.
    """

    poll_attempts: int = DEFAULT_POLL_ATTEMPTS
    poll_backoff_seconds: float = DEFAULT_POLL_BACKOFF_SECONDS
    history_window: int = DEFAULT_HISTORY_WINDOW
    drive_request_retries: int = DEFAULT_DRIVE_REQUEST_RETRIES

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ReconcileSettings":
        """Build settings from config, falling back to defaults per key."""
        return cls(
            poll_attempts=_coerce_int(
                config.get("poll_attempts"),
                DEFAULT_POLL_ATTEMPTS,
                minimum=1,
            ),
            poll_backoff_seconds=_coerce_seconds(
                config.get("poll_backoff_seconds"),
                DEFAULT_POLL_BACKOFF_SECONDS,
            ),
            history_window=_coerce_int(
                config.get("history_window"),
                DEFAULT_HISTORY_WINDOW,
                minimum=1,
            ),
            drive_request_retries=_coerce_int(
                config.get("drive_request_retries"),
                DEFAULT_DRIVE_REQUEST_RETRIES,
                minimum=0,
            ),
        )
