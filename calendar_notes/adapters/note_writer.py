import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import FileSystemError
from ..models import CalendarEvent

logger = logging.getLogger(__name__)


def note_filename(today: date) -> str:
    return f"{today.isoformat()}.md"


def render_markdown(events: Sequence[CalendarEvent], today: Optional[date] = None) -> str:
    """Render the daily note: a dated heading, then one ``##`` section per event."""
    today = today or date.today()
    # Same shape as JavaScript's Date.toDateString(), e.g. "Wed Jan 10 2024"
    markdown = f"# 📅 Events for {today.strftime('%a %b %d %Y')}\n\n"

    for event in events:
        markdown += (
            f"## {event.summary}\n"
            f"📅 {event.start_display}\n"
            f"🔗 [Event Link]({event.html_link})\n\n"
        )

    return markdown


def write_daily_note(vault_dir: Path, events: Sequence[CalendarEvent],
                     today: Optional[date] = None) -> Optional[Path]:
    """Overwrite ``<vault_dir>/<YYYY-MM-DD>.md`` with the rendered events.

    Nothing is written when ``events`` is empty; returns the note path otherwise.
    """
    if not events:
        logger.info("No upcoming events.")
        return None

    today = today or date.today()
    vault_dir = Path(vault_dir)
    file_path = vault_dir / note_filename(today)
    try:
        vault_dir.mkdir(parents=True, exist_ok=True)
        file_path.write_text(render_markdown(events, today), encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"Could not write note {file_path}: {e}", cause=e) from e

    logger.info(f"✅ Google Calendar events synced to {file_path}")
    return file_path
