from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .models import InvalidCredentials, LoginFailed, LoginSucceeded, RecordEntry
from .portal.auth import Authenticator
from .portal.downloader import RecordDownloader
from .portal.driver import SessionDriver
from .portal.listing import ListingExtractor
from .prompt import CredentialPrompter, PromptCancelled


logger = logging.getLogger(__name__)


class RunState(str, enum.Enum):
    IDLE = "idle"
    PROMPTING_CREDENTIALS = "prompting_credentials"
    AUTHENTICATING = "authenticating"
    LOGGED_IN = "logged_in"
    LISTING = "listing"
    DOWNLOADING = "downloading"
    DONE = "done"
    CANCELLED = "cancelled"
    FATAL = "fatal"


class RunReporter:
    """
    Operator-facing progress hooks. The default implementation only logs; the CLI prints and draws a progress bar.
    """

    def invalid_login(self, message: str) -> None:
        logger.warning("%s, please try again", message)

    def logged_in(self) -> None:
        logger.info("Logged in!")

    def listed(self, entries: list[RecordEntry], destination: Path) -> None:
        logger.info("Downloading %d paychecks to %s...", len(entries), destination)

    def downloaded(self, index: int, total: int, path: Path) -> None:
        logger.debug("Downloaded %d/%d: %s", index + 1, total, path.name)

    def finished(self) -> None:
        logger.info("Done!")


@dataclass
class RunSummary:
    state: RunState
    records: list[RecordEntry] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    login_attempts: int = 0


class PaycheckRun:
    """
    Owns the whole flow for one run: prompt -> login (repeat on invalid credentials) -> list -> download each.

    The browser session is opened on the first credential submission and closed on every exit path.
    """

    def __init__(
        self,
        *,
        destination: Path,
        session_factory: Callable[[], SessionDriver],
        prompter: CredentialPrompter,
        authenticator: Authenticator,
        lister: ListingExtractor,
        downloader: RecordDownloader,
        reporter: Optional[RunReporter] = None,
    ) -> None:
        self.destination = Path(destination)
        self._session_factory = session_factory
        self.prompter = prompter
        self.authenticator = authenticator
        self.lister = lister
        self.downloader = downloader
        self.reporter = reporter or RunReporter()

        self.state = RunState.IDLE
        self.history: list[RunState] = [RunState.IDLE]
        self.session: Optional[SessionDriver] = None
        self.summary = RunSummary(state=RunState.IDLE)

    def _enter(self, state: RunState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)
        self.summary.state = state

    def run(self) -> RunSummary:
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"PaycheckRun already started (state={self.state.value})")
        try:
            driver = self._login_until_success()
            self._enter(RunState.LOGGED_IN)
            self.reporter.logged_in()

            self._enter(RunState.LISTING)
            entries = self.lister.list_records(driver)
            self.summary.records = entries
            self.reporter.listed(entries, self.destination)

            self._enter(RunState.DOWNLOADING)
            total = len(entries)
            for i, entry in enumerate(entries):
                path = self.downloader.download_one(driver, entry, self.destination)
                self.summary.written.append(path)
                self.reporter.downloaded(i, total, path)

            self._enter(RunState.DONE)
            self.reporter.finished()
            return self.summary
        except PromptCancelled:
            self._enter(RunState.CANCELLED)
            raise
        except BaseException:
            failed_in = self.state
            self._enter(RunState.FATAL)
            if self.session is not None:
                self.session.save_debug(f"fatal_{failed_in.value}")
            raise
        finally:
            self._close_session()

    def _login_until_success(self) -> SessionDriver:
        while True:
            self._enter(RunState.PROMPTING_CREDENTIALS)
            creds = self.prompter.prompt()

            if self.session is None:
                self.session = self._session_factory()

            self._enter(RunState.AUTHENTICATING)
            self.summary.login_attempts += 1
            result = self.authenticator.attempt(self.session, creds)
            del creds

            if isinstance(result, LoginSucceeded):
                return self.session
            if isinstance(result, InvalidCredentials):
                self.reporter.invalid_login(result.message)
                continue
            if isinstance(result, LoginFailed):
                raise result.cause
            raise AssertionError(f"Unhandled login result: {result!r}")

    def _close_session(self) -> None:
        if self.session is None:
            return
        try:
            self.session.close()
        except Exception:
            logger.debug("Failed to close browser session.", exc_info=True)
