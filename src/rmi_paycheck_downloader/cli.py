from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from .config import AppConfig, load_config
from .logging_config import configure_logging, progress_safe_logging
from .models import RecordEntry
from .orchestrator import PaycheckRun, RunReporter
from .portal.auth import Authenticator
from .portal.downloader import RecordDownloader
from .portal.listing import ListingExtractor
from .portal.session import AutomationSession
from .prompt import CredentialPrompter, PromptCancelled
from .util.banner import asciify


logger = logging.getLogger("rmi_paycheck_downloader")

EXIT_MISSING_FOLDER_ARG = 1
EXIT_FOLDER_NOT_FOUND = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rmi-download",
        description="Download your paycheck history from the RMI HRIS portal as PDF files.",
    )
    # Optional at the argparse level so a missing folder maps to our own exit code (1) instead of argparse's (2).
    p.add_argument("output_folder", nargs="?", default=None, help="Existing folder to save the PDFs into")
    p.add_argument(
        "--env-file",
        default=".env",
        help="Path to a dotenv file (default: .env). If missing, env vars must already be set.",
    )
    p.add_argument("--config", default="config.yaml", help="Path to optional YAML config (default: config.yaml)")
    p.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser (debug). Chromium can only print PDFs headless, so downloads will fail.",
    )
    p.add_argument("--slowmo-ms", type=int, default=None, help="Playwright slow motion in milliseconds (debug).")
    p.add_argument("--debug-dir", default=None, help="Save a screenshot + HTML here if a portal step fails.")
    p.add_argument("--log-level", default=None, help="Override logging level (default: LOG_LEVEL or INFO).")
    return p


class ConsoleReporter(RunReporter):
    def __init__(self) -> None:
        self._bar: Optional[tqdm] = None
        self._logging_redirect: Optional[ExitStack] = None

    def invalid_login(self, message: str) -> None:
        print(f"{message}, please try again")

    def logged_in(self) -> None:
        print("Logged in!")

    def listed(self, entries: list[RecordEntry], destination: Path) -> None:
        print(f"Downloading {len(entries)} paychecks to {destination}...")
        self._logging_redirect = ExitStack()
        self._logging_redirect.enter_context(progress_safe_logging())
        self._bar = tqdm(total=len(entries), unit="paycheck")

    def downloaded(self, index: int, total: int, path: Path) -> None:
        super().downloaded(index, total, path)
        if self._bar is not None:
            self._bar.update(1)

    def finished(self) -> None:
        self.close()
        print("Done!")

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
        if self._logging_redirect is not None:
            self._logging_redirect.close()
            self._logging_redirect = None


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    browser_updates: dict = {}
    if args.headful:
        browser_updates["headless"] = False
    if args.slowmo_ms is not None:
        browser_updates["slow_mo_ms"] = args.slowmo_ms

    updates: dict = {}
    if browser_updates:
        updates["browser"] = cfg.browser.model_copy(update=browser_updates)
    if args.debug_dir:
        updates["debug_dir"] = args.debug_dir
    if args.log_level:
        updates["logging"] = cfg.logging.model_copy(update={"level": args.log_level})
    return cfg.model_copy(update=updates) if updates else cfg


def build_run(cfg: AppConfig, destination: Path, *, reporter: Optional[RunReporter] = None) -> PaycheckRun:
    b = cfg.browser

    def _open_session() -> AutomationSession:
        return AutomationSession.open(
            cfg.portal.login_url,
            headless=b.headless,
            slow_mo_ms=b.slow_mo_ms,
            viewport_width=b.viewport_width,
            viewport_height=b.viewport_height,
            navigation_timeout_ms=b.navigation_timeout_ms,
            channel=b.channel,
            debug_dir=cfg.debug_dir,
        )

    return PaycheckRun(
        destination=destination,
        session_factory=_open_session,
        prompter=CredentialPrompter(),
        authenticator=Authenticator(login_url=cfg.portal.login_url),
        lister=ListingExtractor(records_url=cfg.portal.records_url, date_order=cfg.portal.date_order),
        downloader=RecordDownloader(file_prefix=cfg.portal.file_prefix),
        reporter=reporter,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if not args.output_folder:
        print("Output folder required! Usage: 'rmi-download ./folder'", file=sys.stderr)
        return EXIT_MISSING_FOLDER_ARG

    destination = Path(args.output_folder)
    if not destination.is_dir():
        print(f"Folder '{args.output_folder}' does not exist!", file=sys.stderr)
        return EXIT_FOLDER_NOT_FOUND

    env_path = Path(args.env_file)
    if env_path.exists():
        load_dotenv(env_path)

    # Default logging: can be overridden once config is loaded.
    configure_logging(level=os.getenv("LOG_LEVEL", "INFO"))

    cfg = _apply_overrides(load_config(args.config), args)
    configure_logging(level=cfg.logging.level, file_path=cfg.logging.file_path or None)
    if not cfg.browser.headless:
        logger.warning("Running headful: Chromium cannot export PDFs outside headless mode.")

    print(asciify("RMI Paycheck Downloader", 1))

    reporter = ConsoleReporter()
    paycheck_run = build_run(cfg, destination, reporter=reporter)
    try:
        summary = paycheck_run.run()
    except PromptCancelled:
        # Ctrl-C / EOF at the credential prompt is a normal way to quit.
        return 0
    finally:
        reporter.close()

    logger.info("Saved %d file(s) to %s", len(set(summary.written)), destination)
    return 0


def run() -> None:
    sys.exit(main())
