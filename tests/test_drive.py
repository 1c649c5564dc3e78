"""Tests for dayplanner/drive.py — Drive folder logic against a mocked service."""

import json
from unittest.mock import MagicMock

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials

from dayplanner import drive
from dayplanner.drive import DriveFolder, load_credentials


def _folder(service):
    return DriveFolder(None, "DailyPlannerSync", service=service, http_factory=lambda: None)


def test_ensure_folder_finds_existing():
    service = MagicMock()
    files = service.files.return_value
    files.list.return_value.execute.return_value = {"files": [{"id": "f1", "name": "DailyPlannerSync"}]}

    folder = _folder(service)
    assert folder.ensure_folder() == "f1"
    assert folder.ensure_folder() == "f1"
    assert files.list.call_count == 1  # cached
    query = files.list.call_args.kwargs["q"]
    assert "name='DailyPlannerSync'" in query
    assert "trashed=false" in query
    files.create.assert_not_called()


def test_ensure_folder_creates_missing():
    service = MagicMock()
    files = service.files.return_value
    files.list.return_value.execute.return_value = {"files": []}
    files.create.return_value.execute.return_value = {"id": "new-folder"}

    assert _folder(service).ensure_folder() == "new-folder"
    body = files.create.call_args.kwargs["body"]
    assert body == {"name": "DailyPlannerSync", "mimeType": drive.FOLDER_MIME}


def test_list_files_follows_pages():
    service = MagicMock()
    files = service.files.return_value
    files.list.return_value.execute.side_effect = [
        {"files": [{"id": "f1"}]},
        {"files": [{"id": "a", "name": "2026-02-01.json"}], "nextPageToken": "p2"},
        {"files": [{"id": "b", "name": "2026-02-02.json"}, {"name": "no-id"}]},
    ]

    result = _folder(service).list_files()
    assert result == {"2026-02-01.json": "a", "2026-02-02.json": "b"}
    assert files.list.call_args.kwargs["pageToken"] == "p2"


def test_upload_creates_in_folder():
    service = MagicMock()
    files = service.files.return_value
    files.create.return_value.execute.return_value = {"id": "file-1"}
    folder = _folder(service)
    folder.folder_id = "f1"

    assert folder.upload("2026-02-01.json", b"{}") == "file-1"
    body = files.create.call_args.kwargs["body"]
    assert body == {"name": "2026-02-01.json", "parents": ["f1"]}
    files.update.assert_not_called()


def test_upload_updates_existing():
    service = MagicMock()
    files = service.files.return_value
    files.update.return_value.execute.return_value = {"id": "file-1"}
    folder = _folder(service)

    assert folder.upload("2026-02-01.json", b"{}", file_id="file-1") == "file-1"
    assert files.update.call_args.kwargs["fileId"] == "file-1"
    files.create.assert_not_called()


def test_execute_uses_fresh_http_per_request():
    service = MagicMock()
    service.files.return_value.list.return_value.execute.return_value = {"files": [{"id": "f1"}]}
    made = []

    def factory():
        made.append(object())
        return made[-1]

    folder = DriveFolder(None, service=service, http_factory=factory)
    folder.ensure_folder()
    execute = service.files.return_value.list.return_value.execute
    assert execute.call_args.kwargs["http"] is made[-1]


def test_download_collects_chunks(monkeypatch):
    class FakeDownload:
        def __init__(self, buffer, request):
            self.buffer = buffer
            self.chunks = [b'{"a":', b" 1}"]

        def next_chunk(self):
            self.buffer.write(self.chunks.pop(0))
            return None, not self.chunks

    monkeypatch.setattr(drive, "MediaIoBaseDownload", FakeDownload)
    service = MagicMock()
    assert _folder(service).download("file-1") == b'{"a": 1}'
    service.files.return_value.get_media.assert_called_once_with(fileId="file-1")


def test_quote_escapes_name():
    assert drive._quote("Bob's \\ plans") == "Bob\\'s \\\\ plans"


# ── Credentials ───────────────────────────────────────────────


def _token(tmp_path, expiry):
    path = tmp_path / "token.json"
    path.write_text(json.dumps({
        "token": "access",
        "refresh_token": "refresh",
        "client_id": "client",
        "client_secret": "secret",
        "expiry": expiry,
    }), encoding="utf-8")
    return path


def test_load_credentials_missing_or_malformed(tmp_path):
    assert load_credentials(tmp_path / "token.json") is None
    (tmp_path / "token.json").write_text("not json", encoding="utf-8")
    assert load_credentials(tmp_path / "token.json") is None


def test_load_credentials_valid(tmp_path):
    creds = load_credentials(_token(tmp_path, "2999-01-01T00:00:00Z"))
    assert creds is not None
    assert creds.token == "access"


def test_load_credentials_refresh_failure(tmp_path, monkeypatch):
    def refuse(self, request):
        raise RefreshError("revoked")

    monkeypatch.setattr(Credentials, "refresh", refuse)
    assert load_credentials(_token(tmp_path, "2000-01-01T00:00:00Z")) is None
