"""
Service layer: the fetch-and-write cycle and watch registration.
"""

from .sync_service import register_watch, run_sync, sync_calendar_to_vault

__all__ = ['register_watch', 'run_sync', 'sync_calendar_to_vault']
