"""
Calendar Notes

Keeps a daily markdown note in a local notes vault in step with a Google
Calendar:
- Fetches upcoming events from the primary calendar
- Renders them into a dated markdown file
- Listens for Google push notifications and re-syncs on change
"""

__version__ = "1.0.0"
