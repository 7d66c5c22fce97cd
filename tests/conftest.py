import json
from unittest.mock import MagicMock

import pytest

from calendar_notes.adapters import CalendarClient, CredentialStore
from calendar_notes.config import Settings
from calendar_notes.context import AppContext
from calendar_notes.models import CalendarEvent


CLIENT_SECRETS = {
    "installed": {
        "client_id": "client-123.apps.googleusercontent.com",
        "client_secret": "shh",
        "redirect_uris": ["http://localhost"],
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
    }
}

CACHED_TOKEN = {
    "token": "access-abc",
    "refresh_token": "refresh-xyz",
    "client_id": "client-123.apps.googleusercontent.com",
    "client_secret": "shh",
    "token_uri": "https://oauth2.googleapis.com/token",
    "scopes": ["https://www.googleapis.com/auth/calendar.readonly"],
    "expiry": "2099-01-01T00:00:00Z",
}


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every file at a temp dir, ignoring any local .env"""
    return Settings(
        _env_file=None,
        VAULT_DIR=tmp_path / "vault" / "Calendar",
        GOOGLE_CREDENTIALS_PATH=tmp_path / "credentials.json",
        GOOGLE_TOKEN_PATH=tmp_path / "token.json",
        CALLBACK_URL="https://notes.example.com/webhook",
    )


@pytest.fixture
def credentials_file(settings):
    settings.GOOGLE_CREDENTIALS_PATH.write_text(json.dumps(CLIENT_SECRETS), encoding="utf-8")
    return settings.GOOGLE_CREDENTIALS_PATH


@pytest.fixture
def token_file(settings):
    settings.GOOGLE_TOKEN_PATH.write_text(json.dumps(CACHED_TOKEN), encoding="utf-8")
    return settings.GOOGLE_TOKEN_PATH


@pytest.fixture
def sample_events():
    return [
        CalendarEvent.from_api({
            "summary": "Standup",
            "start": {"dateTime": "2024-01-10T09:00:00Z"},
            "htmlLink": "https://x/1",
        }),
        CalendarEvent.from_api({
            "summary": "Dentist",
            "start": {"date": "2024-01-11"},
            "htmlLink": "https://x/2",
        }),
    ]


@pytest.fixture
def fake_service():
    """MagicMock standing in for googleapiclient's calendar v3 resource"""
    service = MagicMock()
    service.events.return_value.list.return_value.execute.return_value = {"items": []}
    service.events.return_value.watch.return_value.execute.return_value = {}
    return service


@pytest.fixture
def context(settings, fake_service):
    return AppContext(
        settings=settings,
        credential_store=CredentialStore(
            settings.GOOGLE_CREDENTIALS_PATH, settings.GOOGLE_TOKEN_PATH, settings.GOOGLE_SCOPES
        ),
        calendar_client=CalendarClient(service_factory=lambda creds: fake_service),
    )
