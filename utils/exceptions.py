"""
Exceptions shared by the discovery, refresh and outreach jobs.

Only ConfigurationError and AuthenticationError (and their subclasses) are
allowed to escape a job; everything else is contained at the item boundary.
"""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when required settings are missing or malformed.

    Fatal: the CLI aborts before any browser work.
    """


class MissingCredentials(ConfigurationError):
    """Raised when a login form is shown but no email/password pair is configured."""

    def __init__(self, message: Optional[str] = None):
        self.message = message or (
            "Not logged in and LINKEDIN_EMAIL/LINKEDIN_PASSWORD not provided. "
            "Provide COOKIES_JSON or credentials."
        )
        super().__init__(self.message)


class CookieParseError(ConfigurationError):
    """Raised when a cookie payload cannot be parsed even after repair passes."""


class AuthenticationError(Exception):
    """Raised when the login form is still rendered after submitting credentials."""


class ExtractionSkip(Exception):
    """
    Signals that one record lacks a required field and must be skipped.

    Not an error: the item loop records it as a skip and moves on.
    """
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{key}: {reason}")
