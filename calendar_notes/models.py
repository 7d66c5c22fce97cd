from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

UNTITLED_EVENT = "(No title)"
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class ClientCredentials(BaseModel):
    """OAuth client config read from credentials.json."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    redirect_uri: str
    client_type: str = "installed"
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    def to_client_config(self) -> Dict[str, Any]:
        """Client config in the shape google_auth_oauthlib flows expect."""
        return {
            self.client_type: {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


class EventStart(BaseModel):
    date_time: Optional[str] = Field(default=None, alias="dateTime")
    date: Optional[str] = Field(default=None)
    time_zone: Optional[str] = Field(default=None, alias="timeZone")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CalendarEvent(BaseModel):
    """Read-only projection of a Google Calendar event."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    summary: str = Field(default=UNTITLED_EVENT)
    start: EventStart = Field(default_factory=EventStart)
    html_link: str = Field(default="", alias="htmlLink")

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            summary=item.get("summary") or UNTITLED_EVENT,
            start=EventStart.model_validate(item.get("start") or {}),
            html_link=item.get("htmlLink", ""),
        )

    @property
    def start_display(self) -> str:
        # Timed events win over all-day dates
        return self.start.date_time or self.start.date or ""


class Subscription(BaseModel):
    """Push-notification channel returned by events.watch."""

    id: str
    type: str = "web_hook"
    address: str
    ttl_seconds: int
    resource_id: Optional[str] = None
    resource_uri: Optional[str] = None
    expiration: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], *, address: str, ttl_seconds: int) -> "Subscription":
        expiration = None
        raw_expiration = data.get("expiration")
        if raw_expiration:
            # Google reports expiration as epoch milliseconds
            expiration = datetime.fromtimestamp(int(raw_expiration) / 1000, tz=timezone.utc)
        return cls(
            id=data["id"],
            type=data.get("type", "web_hook"),
            address=data.get("address", address),
            ttl_seconds=ttl_seconds,
            resource_id=data.get("resourceId"),
            resource_uri=data.get("resourceUri"),
            expiration=expiration,
        )


class SyncResult(BaseModel):
    """Outcome of one fetch-and-write cycle."""

    ok: bool
    trigger: str
    event_count: int = 0
    path: Optional[str] = None
    error: Optional[str] = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
