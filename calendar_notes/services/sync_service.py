import logging
from datetime import date
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from ..adapters.note_writer import write_daily_note
from ..context import AppContext
from ..exceptions import CalendarNotesError
from ..models import Subscription, SyncResult

logger = logging.getLogger(__name__)


def sync_calendar_to_vault(context: AppContext, trigger: str = "manual",
                           today: Optional[date] = None) -> SyncResult:
    """Authorize, list upcoming events and overwrite today's note.

    Blocking; raises CalendarNotesError subclasses on failure.
    """
    settings = context.settings
    store = context.credential_store

    auth = store.load_or_create_authorization()
    token_before = auth.token
    try:
        events = context.calendar_client.list_upcoming_events(auth, max_results=settings.MAX_RESULTS)
    finally:
        # The client may have refreshed the token even if the call then failed
        store.persist_if_refreshed(auth, token_before)

    path = write_daily_note(settings.VAULT_DIR, events, today=today)
    return SyncResult(
        ok=True,
        trigger=trigger,
        event_count=len(events),
        path=str(path) if path else None,
    )


async def run_sync(context: AppContext, trigger: str) -> SyncResult:
    """Run one sync cycle off the event loop; failures come back as ``ok=False``."""
    try:
        result = await run_in_threadpool(sync_calendar_to_vault, context, trigger)
    except CalendarNotesError as e:
        logger.error(f"❌ Calendar sync ({trigger}) failed: {e}")
        result = SyncResult(ok=False, trigger=trigger, error=str(e))
    except Exception as e:
        logger.exception(f"❌ Unexpected error during calendar sync ({trigger})")
        result = SyncResult(ok=False, trigger=trigger, error=str(e))

    context.last_sync = result
    return result


def _register_watch_blocking(context: AppContext) -> Subscription:
    settings = context.settings
    if settings.callback_is_placeholder:
        logger.warning(f"CALLBACK_URL is still the placeholder {settings.CALLBACK_URL}; "
                       "Google will not be able to deliver notifications")

    auth = context.credential_store.load_or_create_authorization()
    token_before = auth.token
    try:
        subscription = context.calendar_client.register_watch(
            auth, settings.CALLBACK_URL, ttl_seconds=settings.WATCH_TTL_SECONDS
        )
    finally:
        context.credential_store.persist_if_refreshed(auth, token_before)
    return subscription


async def register_watch(context: AppContext) -> Optional[Subscription]:
    """Best-effort watch registration; errors are logged, never raised."""
    try:
        subscription = await run_in_threadpool(_register_watch_blocking, context)
    except CalendarNotesError as e:
        logger.error(f"❌ Google Calendar watch registration failed: {e}")
        return None
    except Exception:
        logger.exception("❌ Unexpected error registering Google Calendar watch")
        return None

    # Previous channels are not stopped; they expire after their TTL
    logger.info(
        f"🔔 Google Calendar Watch Registered: id={subscription.id} "
        f"resource_id={subscription.resource_id} expiration={subscription.expiration}"
    )
    context.subscription = subscription
    return subscription
