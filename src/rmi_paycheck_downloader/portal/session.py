from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright


logger = logging.getLogger(__name__)


class AutomationSession:
    """
    One Playwright browser + one page, used for every navigation in a run.

    Implements `PageDriver`. Use `AutomationSession.open(...)` (or as a context manager) and always `close()`.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        slow_mo_ms: int = 0,
        viewport_width: int = 1200,
        viewport_height: int = 1200,
        navigation_timeout_ms: int = 30_000,
        channel: str = "",
        debug_dir: Optional[str] = None,
    ) -> None:
        self.headless = headless
        self.slow_mo_ms = int(slow_mo_ms or 0)
        self.viewport = {"width": int(viewport_width), "height": int(viewport_height)}
        self.navigation_timeout_ms = int(navigation_timeout_ms)
        self.channel = (channel or "").strip()
        self.debug_dir = debug_dir

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._closed = False

    @classmethod
    def open(cls, url: str, **kwargs) -> "AutomationSession":
        session = cls(**kwargs)
        try:
            session._start(url)
        except BaseException:
            session.close()
            raise
        return session

    def __enter__(self) -> "AutomationSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _start(self, url: str) -> None:
        logger.info("Opening browser...")
        self._playwright = sync_playwright().start()
        self._browser = self._launch(self._playwright)
        self._context = self._browser.new_context(viewport=self.viewport)
        self._page = self._context.new_page()
        self._page.set_default_navigation_timeout(self.navigation_timeout_ms)
        self._page.goto(url, wait_until="load")
        logger.debug("Initial navigation complete (url=%s)", self._page.url)

    def _launch(self, p: Playwright) -> Browser:
        if self.channel:
            return p.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms, channel=self.channel)

        # Prefer Playwright's bundled Chromium, but fall back to a system-installed browser if the
        # Playwright browser cache is empty.
        try:
            return p.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms)
        except Exception as e:
            msg = str(e)
            if "Executable doesn't exist" not in msg:
                raise

            logger.warning(
                "Playwright Chromium executable missing; falling back to system browser channel. (%s)",
                msg,
            )

            try:
                return p.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms, channel="chrome")
            except Exception:
                return p.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms, channel="msedge")

    def close(self) -> None:
        """
        Release the page, context, browser and Playwright driver. Idempotent and never raises,
        so it can run during error cleanup without masking the original exception.
        """
        if self._closed:
            return
        self._closed = True

        for name, closer in (
            ("context", self._context.close if self._context is not None else None),
            ("browser", self._browser.close if self._browser is not None else None),
            ("playwright", self._playwright.stop if self._playwright is not None else None),
        ):
            if closer is None:
                continue
            try:
                closer()
            except Exception:
                logger.debug("Failed to close %s.", name, exc_info=True)

        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Automation session is not open.")
        return self._page

    # --- PageDriver ---

    def current_url(self) -> str:
        return self._require_page().url

    def goto(self, url: str) -> None:
        self._require_page().goto(url, wait_until="load")

    def read_text(self, selector: str) -> Optional[str]:
        loc = self._require_page().locator(selector)
        if loc.count() == 0:
            return None
        return loc.first.inner_text()

    def read_options(self, selector: str) -> list[tuple[str, str]]:
        # eval_on_selector raises if the select is missing, which is what we want: a changed page is fatal.
        raw = self._require_page().eval_on_selector(
            selector,
            "el => Array.from(el.options).map(o => [o.value, o.innerText])",
        )
        return [(str(value or ""), str(text or "")) for value, text in raw]

    def fill(self, selector: str, text: str) -> None:
        self._require_page().fill(selector, text)

    def click(self, selector: str) -> None:
        self._require_page().click(selector)

    def set_value(self, selector: str, value: str) -> None:
        # Assign directly (no change event) so the WebForms autopostback does not fire early.
        self._require_page().eval_on_selector(selector, "(el, v) => { el.value = v; }", value)

    @contextmanager
    def expect_navigation(self) -> Iterator[None]:
        with self._require_page().expect_navigation(wait_until="load"):
            yield

    def export_pdf(self, path: Path) -> None:
        # Chromium only supports page.pdf() in headless mode.
        self._require_page().pdf(path=str(path))

    def save_debug(self, name_prefix: str) -> None:
        if not self.debug_dir or self._page is None:
            return
        page = self._page
        try:
            out_dir = Path(self.debug_dir)
            out_dir.mkdir(parents=True, exist_ok=True)
            page.screenshot(path=str(out_dir / f"{name_prefix}.png"), full_page=True)
            (out_dir / f"{name_prefix}.html").write_text(page.content(), encoding="utf-8")
            # Also save the rendered body text so the page can be inspected without DOM tooling.
            try:
                (out_dir / f"{name_prefix}.txt").write_text(page.inner_text("body"), encoding="utf-8")
            except Exception:
                pass
        except Exception:
            logger.debug("Failed to save debug artifacts.", exc_info=True)
