"""Google Drive v3 metadata client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from drivecord.core.config import (
    DEFAULT_DRIVE_REQUEST_RETRIES,
    DRIVE_FILES_ENDPOINT,
    DRIVE_METADATA_FIELDS,
)
from drivecord.core.exceptions import (
    DriveAccessDeniedError,
    DriveFileNotFoundError,
    DriveTransientError,
)
from drivecord.core.models import FileMetadata
from drivecord.services.http import RetryOptions, request_with_retries

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
_REQUIRED_FIELDS = ("name", "webViewLink", "mimeType", "modifiedTime")


@dataclass(frozen=True, slots=True)
class DriveCredentials:
    """API key and/or OAuth access token for the Drive API."""

    api_key: str | None = None
    access_token: str | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> DriveCredentials:
        api_key = config.get("drive_api_key")
        access_token = config.get("drive_access_token")
        return cls(
            api_key=str(api_key) if api_key else None,
            access_token=str(access_token) if access_token else None,
        )


def _error_detail(response: httpx.Response) -> str:
    """Pull the API's error message out of a JSON error body if present."""
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"HTTP {response.status_code}: {error['message']}"
    return f"HTTP {response.status_code}"


class DriveClient:
    """Fetch display metadata for Drive files, one request per file."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: DriveCredentials,
        *,
        retries: int = DEFAULT_DRIVE_REQUEST_RETRIES,
        endpoint: str = DRIVE_FILES_ENDPOINT,
    ) -> None:
        self._http_client = http_client
        self._credentials = credentials
        self._retry_options = RetryOptions(retries=retries)
        self._endpoint = endpoint.rstrip("/")

    def _request_params(self) -> dict[str, str]:
        params = {
            "fields": DRIVE_METADATA_FIELDS,
            "supportsAllDrives": "true",
        }
        if self._credentials.api_key:
            params["key"] = self._credentials.api_key
        return params

    def _request_headers(self) -> dict[str, str]:
        if self._credentials.access_token:
            return {"Authorization": f"Bearer {self._credentials.access_token}"}
        return {}

    async def get_metadata(self, file_id: str) -> FileMetadata:
        """Return name, link, MIME type and modification time of a file.

        Raises:
            DriveFileNotFoundError: The file does not exist or is not shared.
            DriveAccessDeniedError: The credentials were rejected.
            DriveTransientError: Network failure or unusable response after
                retries.

        """
        url = f"{self._endpoint}/{quote(file_id, safe='')}"

        async def _request() -> httpx.Response:
            return await self._http_client.get(
                url,
                params=self._request_params(),
                headers=self._request_headers(),
            )

        try:
            response = await request_with_retries(
                _request,
                options=self._retry_options,
                log_context=f"Drive file {file_id}",
            )
        except httpx.HTTPError as exc:
            raise DriveTransientError(file_id, str(exc)) from exc

        if response.status_code == HTTP_NOT_FOUND:
            raise DriveFileNotFoundError(file_id, _error_detail(response))
        if response.status_code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            raise DriveAccessDeniedError(file_id, _error_detail(response))
        if response.status_code != HTTP_OK:
            raise DriveTransientError(file_id, _error_detail(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise DriveTransientError(file_id, "response is not JSON") from exc

        if not isinstance(payload, dict):
            raise DriveTransientError(file_id, "response is not a JSON object")

        missing = [key for key in _REQUIRED_FIELDS if not payload.get(key)]
        if missing:
            detail = f"response lacks {', '.join(missing)}"
            raise DriveTransientError(file_id, detail)

        metadata = FileMetadata(
            name=str(payload["name"]),
            web_view_link=str(payload["webViewLink"]),
            mime_type=str(payload["mimeType"]),
            modified_time=str(payload["modifiedTime"]),
        )
        try:
            _ = metadata.modified_at
        except ValueError as exc:
            detail = f"unparseable modifiedTime {metadata.modified_time!r}"
            raise DriveTransientError(file_id, detail) from exc
        return metadata

    async def fetch_all(self, file_ids: Iterable[str]) -> list[FileMetadata]:
        """Fetch metadata for every id in order; the first failure propagates."""
        results: list[FileMetadata] = []
        for file_id in file_ids:
            results.append(await self.get_metadata(file_id))
        logger.debug("Fetched Drive metadata for %s file(s)", len(results))
        return results
