from __future__ import annotations

import logging

from config.settings import Settings
from ports.page import PageDriver, first_visible
from utils.exceptions import AuthenticationError, MissingCredentials


logger = logging.getLogger(__name__)


LOGIN_EMAIL = ("input#session_key", "input[name=session_key]", "input#username")
LOGIN_PASSWORD = ("input#session_password", "input[name=session_password]", "input#password")
LOGIN_SUBMIT = ('button[type="submit"]:has-text("Sign in")', 'button[type="submit"]')


class SessionGuard:
    """Makes sure the browser session is signed in before any scraping starts."""

    def __init__(self, page: PageDriver, settings: Settings):
        self.page = page
        self.settings = settings

    def login_form_visible(self) -> bool:
        return first_visible(self.page, LOGIN_EMAIL) is not None

    def ensure_authenticated(self) -> None:
        """Sign in through the login form if it is shown; no-op otherwise.

        Raises MissingCredentials when a login is needed but no credentials are
        configured, and AuthenticationError when the form is still shown after submit.
        """
        self.page.goto(self.settings.home_url)
        email_field = first_visible(self.page, LOGIN_EMAIL)
        logger.info("Login form visible: %s", email_field is not None, extra={"step": "session"})
        if email_field is None:
            return
        if not self.settings.has_credentials:
            raise MissingCredentials()

        password_field = first_visible(self.page, LOGIN_PASSWORD) or LOGIN_PASSWORD[0]
        self.page.fill(email_field, self.settings.linkedin_email)
        self.page.fill(password_field, self.settings.linkedin_password)
        self.page.click(first_visible(self.page, LOGIN_SUBMIT) or LOGIN_SUBMIT[0])
        self.page.wait_for_load()

        if self.login_form_visible():
            raise AuthenticationError("Login form still shown after submitting credentials")
        logger.info("Signed in as %s", self.settings.linkedin_email, extra={"step": "session", "status": "ok"})
