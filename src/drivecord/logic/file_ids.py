"""Find Google Drive links in message text and pull out their file ids."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

from drivecord.core.config import DRIVE_HOSTS, FILE_ID_MARKERS
from drivecord.core.models import FileReference

if TYPE_CHECKING:
    from collections.abc import Iterable

_GENERIC_URL_RE = re.compile(r"https?://[^\s<>{}\[\]|`\"]+")
_FILE_ID_RE = re.compile(r"[-\w]+", re.ASCII)
_TRAILING_PUNCTUATION = ".,:;!?'*~"


def _trim_url(url: str) -> str:
    """Drop sentence punctuation and unbalanced closing parens after a URL."""
    while url:
        last = url[-1]
        if last in _TRAILING_PUNCTUATION:
            url = url[:-1]
            continue
        if last == ")" and url.count(")") > url.count("("):
            url = url[:-1]
            continue
        break
    return url


def find_urls(text: str) -> list[str]:
    """Return every http(s) URL span in `text`, in order of appearance."""
    urls = (_trim_url(match.group(0)) for match in _GENERIC_URL_RE.finditer(text))
    return [url for url in urls if url]


def extract_file_id(url: str) -> str | None:
    """Return the Drive file id carried by `url`, or None.

    Only `drive.google.com` and `docs.google.com` links count. The id is the
    path segment right after the first `d` or `folders` segment, and must
    consist of letters, digits, `-` and `_` only.
    """
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError:
        return None

    if hostname is None or hostname.lower() not in DRIVE_HOSTS:
        return None

    segments = [unquote(segment) for segment in parsed.path.split("/")[1:]]
    for index, segment in enumerate(segments):
        if segment not in FILE_ID_MARKERS:
            continue
        if index + 1 >= len(segments):
            return None
        candidate = segments[index + 1]
        return candidate if _FILE_ID_RE.fullmatch(candidate) else None
    return None


def extract_file_ids(text: str) -> list[FileReference]:
    """Return the distinct Drive file ids linked in `text`.

    Order follows the first occurrence of each id; repeated links collapse.
    """
    file_ids = (extract_file_id(url) for url in find_urls(text))
    unique_ids = dict.fromkeys(file_id for file_id in file_ids if file_id)
    return [FileReference(file_id) for file_id in unique_ids]


def extract_embed_file_ids(urls: Iterable[str | None]) -> list[str]:
    """Return the Drive file ids of embed URLs, skipping non-Drive ones.

    Not deduplicated: callers compare the result's length against the
    number of embeds to tell whether every embed is a Drive link.
    """
    file_ids: list[str] = []
    for url in urls:
        if not url:
            continue
        file_id = extract_file_id(url)
        if file_id is not None:
            file_ids.append(file_id)
    return file_ids
