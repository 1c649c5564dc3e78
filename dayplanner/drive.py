"""Google Drive folder used as the remote side of plan sync."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Callable

import google_auth_httplib2
import httplib2
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from dayplanner.fileio import write_text_atomic

logger = logging.getLogger("dayplanner.drive")

SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/drive.file",
]
FOLDER_MIME = "application/vnd.google-apps.folder"


def load_credentials(path: Path) -> Credentials | None:
    """Read the token file written by the sign-in flow, refreshing if expired.

    Returns None when there is no usable token; the caller treats that as
    "not signed in".
    """
    if not path.exists():
        return None
    try:
        creds = Credentials.from_authorized_user_file(str(path), SCOPES)
    except ValueError as exc:
        logger.warning("Ignoring malformed token file %s: %s", path, exc)
        return None
    if not creds.valid and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            logger.warning("Token refresh failed: %s", exc)
            return None
        write_text_atomic(path, creds.to_json())
        logger.info("Refreshed Google access token")
    return creds if creds.valid else None


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DriveFolder:
    """RemoteFolder on Drive v3, scoped to a single named folder.

    httplib2 connections are not thread-safe, so every request executes on
    its own authorized Http object.
    """

    def __init__(
        self,
        credentials: Any,
        folder_name: str = "DailyPlannerSync",
        timeout: float = 30.0,
        service: Any = None,
        http_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.credentials = credentials
        self.folder_name = folder_name
        self.timeout = timeout
        self.folder_id: str | None = None
        self._service = service
        self._http_factory = http_factory or self._authorized_http

    def _authorized_http(self) -> Any:
        return google_auth_httplib2.AuthorizedHttp(
            self.credentials, http=httplib2.Http(timeout=self.timeout)
        )

    @property
    def service(self) -> Any:
        if self._service is None:
            self._service = build(
                "drive", "v3", http=self._http_factory(), cache_discovery=False
            )
        return self._service

    def _execute(self, request: Any) -> dict[str, Any]:
        return request.execute(http=self._http_factory())

    def ensure_folder(self) -> str:
        if self.folder_id:
            return self.folder_id
        query = (
            f"name='{_quote(self.folder_name)}' and mimeType='{FOLDER_MIME}' "
            "and trashed=false"
        )
        response = self._execute(
            self.service.files().list(q=query, spaces="drive", fields="files(id, name)")
        )
        files = response.get("files", [])
        if files:
            self.folder_id = files[0]["id"]
        else:
            created = self._execute(
                self.service.files().create(
                    body={"name": self.folder_name, "mimeType": FOLDER_MIME},
                    fields="id",
                )
            )
            self.folder_id = created["id"]
            logger.info("Created Drive folder %s", self.folder_name)
        return self.folder_id

    def list_files(self) -> dict[str, str]:
        folder_id = self.ensure_folder()
        results: dict[str, str] = {}
        page_token: str | None = None
        while True:
            response = self._execute(
                self.service.files().list(
                    q=f"'{_quote(folder_id)}' in parents and trashed=false",
                    spaces="drive",
                    fields="nextPageToken, files(id, name)",
                    pageToken=page_token,
                )
            )
            for item in response.get("files", []):
                name = item.get("name")
                file_id = item.get("id")
                if name and file_id:
                    results[name] = file_id
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return results

    def upload(self, name: str, data: bytes, file_id: str | None = None) -> str:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype="application/json", resumable=False)
        if file_id:
            request = self.service.files().update(fileId=file_id, media_body=media, fields="id")
        else:
            request = self.service.files().create(
                body={"name": name, "parents": [self.ensure_folder()]},
                media_body=media,
                fields="id",
            )
        return self._execute(request).get("id", file_id or "")

    def download(self, file_id: str) -> bytes:
        request = self.service.files().get_media(fileId=file_id)
        request.http = self._http_factory()
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        return buffer.getvalue()
