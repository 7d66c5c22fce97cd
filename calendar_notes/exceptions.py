"""
Calendar Notes Exceptions

Custom exception classes raised at the adapter seams: credential and token
files, the OAuth flow, the Google Calendar API and the notes vault.
"""

from typing import Optional


class CalendarNotesError(Exception):
    """Base exception for calendar-notes errors"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigError(CalendarNotesError):
    """Missing or malformed credential/token file"""
    pass


class AuthError(CalendarNotesError):
    """Authorization flow or token refresh failure"""
    pass


class ApiError(CalendarNotesError):
    """Remote Google Calendar call failure (network or quota)"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class FileSystemError(CalendarNotesError):
    """Vault directory or note file could not be written"""
    pass
