from __future__ import annotations

import logging
from typing import Optional

from ..models import Credentials, InvalidCredentials, LoginFailed, LoginResult, LoginSucceeded
from .driver import PageDriver
from .selectors import PortalSelectors


logger = logging.getLogger(__name__)


class Authenticator:
    """
    Drives the HRIS login form.

    The portal posts back to the login page when credentials are rejected and shows the reason in a label;
    anything else is treated as a successful login.
    """

    def __init__(self, *, login_url: str, selectors: Optional[PortalSelectors] = None) -> None:
        self.login_url = login_url
        self.selectors = selectors or PortalSelectors()

    def login(self, driver: PageDriver, creds: Credentials) -> LoginResult:
        s = self.selectors
        driver.fill(s.username_input, creds.username)
        driver.fill(s.password_input, creds.password)

        logger.info("Logging in...")
        with driver.expect_navigation():
            driver.click(s.login_submit)

        message = self._invalid_login_message(driver)
        if message is not None:
            logger.debug("Portal rejected credentials for username=%r", creds.username)
            return InvalidCredentials(message=message)
        return LoginSucceeded()

    def attempt(self, driver: PageDriver, creds: Credentials) -> LoginResult:
        """
        Like `login()`, but reports unexpected errors as `LoginFailed` instead of raising.
        """
        try:
            return self.login(driver, creds)
        except Exception as e:
            return LoginFailed(cause=e)

    def _invalid_login_message(self, driver: PageDriver) -> Optional[str]:
        # Absence of the specific error text is assumed to mean success.
        if driver.current_url() != self.login_url:
            return None
        text = driver.read_text(self.selectors.login_error_message)
        if text and self.selectors.invalid_login_text in text:
            return text
        return None
