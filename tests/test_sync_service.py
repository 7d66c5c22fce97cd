import json
from datetime import date
from pathlib import Path
from unittest.mock import Mock

import pytest

from calendar_notes.adapters.google_calendar import CalendarClient
from calendar_notes.exceptions import ApiError, ConfigError
from calendar_notes.services import sync_service
from calendar_notes.services.sync_service import register_watch, run_sync, sync_calendar_to_vault

ITEMS = {
    "items": [
        {"summary": "Standup", "start": {"dateTime": "2024-01-10T09:00:00Z"}, "htmlLink": "https://x/1"},
    ]
}


def _refresh_then_fail(creds):
    """Service factory that rotates the access token, then loses the connection"""
    creds.token = "refreshed-mid-call"
    service = Mock()
    service.events.return_value.list.return_value.execute.side_effect = ConnectionError("offline")
    service.events.return_value.watch.return_value.execute.side_effect = ConnectionError("offline")
    return service


class TestSyncCalendarToVault:

    def test_full_cycle_writes_note(self, context, credentials_file, token_file, fake_service):
        fake_service.events.return_value.list.return_value.execute.return_value = ITEMS

        result = sync_calendar_to_vault(context, trigger="test", today=date(2024, 1, 10))

        assert result.ok is True
        assert result.event_count == 1
        note = Path(result.path)
        assert note == context.settings.VAULT_DIR / "2024-01-10.md"
        assert "## Standup" in note.read_text(encoding="utf-8")

    def test_no_events_writes_nothing(self, context, credentials_file, token_file):
        result = sync_calendar_to_vault(context, trigger="test")
        assert result.ok is True
        assert result.event_count == 0
        assert result.path is None
        assert not context.settings.VAULT_DIR.exists()

    def test_missing_credentials_raises(self, context):
        with pytest.raises(ConfigError):
            sync_calendar_to_vault(context)

    def test_token_refreshed_before_failure_is_persisted(self, context, credentials_file, token_file):
        context.calendar_client = CalendarClient(service_factory=_refresh_then_fail)

        with pytest.raises(ApiError):
            sync_calendar_to_vault(context)

        assert json.loads(token_file.read_text(encoding="utf-8"))["token"] == "refreshed-mid-call"


class TestRunSync:

    @pytest.mark.asyncio
    async def test_success_recorded_on_context(self, context, credentials_file, token_file, fake_service):
        fake_service.events.return_value.list.return_value.execute.return_value = ITEMS
        result = await run_sync(context, trigger="startup")
        assert result.ok is True
        assert result.trigger == "startup"
        assert context.last_sync is result

    @pytest.mark.asyncio
    async def test_config_error_is_returned_not_raised(self, context):
        result = await run_sync(context, trigger="startup")
        assert result.ok is False
        assert "Credentials file not found" in result.error
        assert context.last_sync is result

    @pytest.mark.asyncio
    async def test_api_error_is_returned_not_raised(self, context, credentials_file, token_file, fake_service):
        fake_service.events.return_value.list.return_value.execute.side_effect = ConnectionError("offline")
        result = await run_sync(context, trigger="webhook:exists")
        assert result.ok is False
        assert "offline" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_error_is_returned_not_raised(self, context, monkeypatch):
        monkeypatch.setattr(sync_service, "sync_calendar_to_vault", Mock(side_effect=KeyError("boom")))
        result = await run_sync(context, trigger="startup")
        assert result.ok is False


class TestRegisterWatch:

    @pytest.mark.asyncio
    async def test_registration_stored_on_context(self, context, credentials_file, token_file, fake_service):
        fake_service.events.return_value.watch.return_value.execute.return_value = {"id": "chan-1", "resourceId": "r"}
        subscription = await register_watch(context)
        assert subscription.id == "chan-1"
        assert context.subscription is subscription
        body = fake_service.events.return_value.watch.call_args.kwargs["body"]
        assert body["address"] == "https://notes.example.com/webhook"

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_swallowed(self, context, credentials_file, token_file, monkeypatch):
        monkeypatch.setattr(context.calendar_client, "register_watch",
                            Mock(side_effect=ApiError("quota", status_code=403)))
        assert await register_watch(context) is None
        assert context.subscription is None

    @pytest.mark.asyncio
    async def test_placeholder_callback_is_warned(self, context, credentials_file, token_file, caplog):
        context.settings = context.settings.model_copy(
            update={"CALLBACK_URL": "https://your-public-url.com/webhook"}
        )
        await register_watch(context)
        assert any("placeholder" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_token_refreshed_before_failure_is_persisted(self, context, credentials_file, token_file):
        context.calendar_client = CalendarClient(service_factory=_refresh_then_fail)

        assert await register_watch(context) is None

        assert json.loads(token_file.read_text(encoding="utf-8"))["token"] == "refreshed-mid-call"
