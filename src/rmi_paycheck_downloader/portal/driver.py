from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Optional, Protocol


class PageDriver(Protocol):
    """
    The page operations the login/listing/download steps rely on.

    `AutomationSession` implements this on top of Playwright; tests use an in-memory fake.
    """

    def current_url(self) -> str: ...

    def goto(self, url: str) -> None: ...

    def read_text(self, selector: str) -> Optional[str]:
        """Inner text of the first element matching `selector`, or None if there is no such element."""
        ...

    def read_options(self, selector: str) -> list[tuple[str, str]]:
        """`(value, text)` for every `<option>` of the select matching `selector`, in DOM order."""
        ...

    def fill(self, selector: str, text: str) -> None: ...

    def click(self, selector: str) -> None: ...

    def set_value(self, selector: str, value: str) -> None: ...

    def expect_navigation(self) -> AbstractContextManager[None]:
        """Block on exit until the navigation triggered inside the `with` block has loaded."""
        ...

    def export_pdf(self, path: Path) -> None: ...

    def save_debug(self, name_prefix: str) -> None: ...


class SessionDriver(PageDriver, Protocol):
    """A `PageDriver` that owns its browser and must be closed exactly once per run."""

    def close(self) -> None: ...
