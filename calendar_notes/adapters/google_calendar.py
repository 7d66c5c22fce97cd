import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..exceptions import ApiError, AuthError
from ..models import CalendarEvent, Subscription

logger = logging.getLogger(__name__)


def _build_service(creds: Credentials) -> Any:
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


class CalendarClient:
    """Thin wrapper over the Google Calendar v3 events API."""

    def __init__(self, calendar_id: str = "primary",
                 service_factory: Callable[[Credentials], Any] = _build_service):
        self.calendar_id = calendar_id
        self.service_factory = service_factory

    def list_upcoming_events(self, auth: Credentials, max_results: int = 10,
                             now: Optional[datetime] = None) -> List[CalendarEvent]:
        """List events starting from now, recurring events expanded, ordered by start time.

        Returns [] when the calendar has nothing upcoming.
        """
        time_min = (now or datetime.now(timezone.utc)).isoformat()
        try:
            events_result = self.service_factory(auth).events().list(
                calendarId=self.calendar_id,
                timeMin=time_min,
                maxResults=max_results,
                singleEvents=True,
                orderBy="startTime",
            ).execute()
        except HttpError as error:
            raise ApiError(f"Error fetching events: {error}",
                           status_code=error.resp.status, cause=error) from error
        except RefreshError as error:
            raise AuthError(f"Token refresh failed while fetching events: {error}", cause=error) from error
        except (GoogleAuthError, OSError) as error:
            raise ApiError(f"Error fetching events: {error}", cause=error) from error

        items = events_result.get("items") or []
        logger.debug(f"Fetched {len(items)} events from {self.calendar_id}")
        return [CalendarEvent.from_api(item) for item in items]

    def register_watch(self, auth: Credentials, callback_url: str,
                       ttl_seconds: int = 86400) -> Subscription:
        """Open a push-notification channel for event changes on the calendar.

        Every call creates a new channel with a fresh id. Earlier channels are
        left to expire on their own.
        """
        body = {
            "id": str(uuid.uuid4()),
            "type": "web_hook",
            "address": callback_url,
            "params": {"ttl": str(ttl_seconds)},
        }
        try:
            response = self.service_factory(auth).events().watch(
                calendarId=self.calendar_id,
                body=body,
            ).execute()
        except HttpError as error:
            raise ApiError(f"Error registering watch: {error}",
                           status_code=error.resp.status, cause=error) from error
        except RefreshError as error:
            raise AuthError(f"Token refresh failed while registering watch: {error}", cause=error) from error
        except (GoogleAuthError, OSError) as error:
            raise ApiError(f"Error registering watch: {error}", cause=error) from error

        return Subscription.from_api({**body, **(response or {})},
                                     address=callback_url, ttl_seconds=ttl_seconds)
