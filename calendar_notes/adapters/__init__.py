"""
Adapter modules for external systems.

This module contains adapters for:
- OAuth client credentials and the cached user token
- The Google Calendar events API
- Markdown notes in the local vault
"""

from .credentials import CredentialStore
from .google_calendar import CalendarClient
from .note_writer import render_markdown, write_daily_note

__all__ = [
    'CredentialStore',
    'CalendarClient',
    'render_markdown',
    'write_daily_note',
]
