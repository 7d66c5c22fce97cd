from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .adapters import CalendarClient, CredentialStore
from .config import Settings
from .models import Subscription, SyncResult


@dataclass
class AppContext:
    """Everything the listener and sync routines share, built once at startup."""

    settings: Settings
    credential_store: CredentialStore
    calendar_client: CalendarClient
    last_sync: Optional[SyncResult] = None
    subscription: Optional[Subscription] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            settings=settings,
            credential_store=CredentialStore(
                settings.GOOGLE_CREDENTIALS_PATH,
                settings.GOOGLE_TOKEN_PATH,
                settings.GOOGLE_SCOPES,
            ),
            calendar_client=CalendarClient(calendar_id=settings.GOOGLE_CALENDAR_ID),
        )
