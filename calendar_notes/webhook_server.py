"""
FastAPI webhook server receiving Google Calendar push notifications.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Header
from fastapi.responses import PlainTextResponse

from .context import AppContext
from .services.sync_service import run_sync

logger = logging.getLogger(__name__)

# Resource states that mean the calendar (may have) changed
SYNC_STATES = {"exists", "sync"}


def create_app(context: AppContext) -> FastAPI:
    app = FastAPI(title="Calendar Notes Webhook")
    app.state.context = context

    @app.post(context.settings.WEBHOOK_PATH, response_class=PlainTextResponse)
    async def handle_calendar_notification(
        resource_state: Optional[str] = Header(default=None, alias="x-goog-resource-state"),
        channel_id: Optional[str] = Header(default=None, alias="x-goog-channel-id"),
        resource_id: Optional[str] = Header(default=None, alias="x-goog-resource-id"),
        message_number: Optional[str] = Header(default=None, alias="x-goog-message-number"),
    ) -> PlainTextResponse:
        """Handle a push notification from Google Calendar.

        Always answers 200 so Google keeps the channel alive, even when the
        triggered sync fails.
        """
        logger.info(
            f"🔔 Webhook received: state={resource_state} channel={channel_id} "
            f"resource={resource_id} message={message_number}"
        )

        if resource_state in SYNC_STATES:
            logger.info("📅 Calendar updated, fetching new events...")
            await run_sync(context, trigger=f"webhook:{resource_state}")

        return PlainTextResponse("OK", status_code=200)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        last_sync = context.last_sync
        subscription = context.subscription
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "vault_dir": str(context.settings.VAULT_DIR),
            "last_sync": last_sync.model_dump(mode="json") if last_sync else None,
            "watch_channel_id": subscription.id if subscription else None,
        }

    return app
