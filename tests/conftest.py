from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


LOGIN_URL = "https://hris.example.test/hris/hrisLogin.aspx?Act=2"
RECORDS_URL = "https://hris.example.test/hris/Summit/Employee/Edit_PayHistory.aspx"
HOME_URL = "https://hris.example.test/hris/Summit/Employee/Home.aspx"
INVALID_LOGIN_MESSAGE = "Invalid Login Information. Please try again."


def pytest_configure(config: Any) -> None:
    config.addinivalue_line(
        "markers",
        "portal: integration smoke tests that require real HRIS credentials",
    )


class FakePortal:
    """
    In-memory stand-in for the HRIS pages, implementing the PageDriver/SessionDriver surface.

    Records every call in `calls` so tests can assert ordering.
    """

    def __init__(
        self,
        *,
        valid_logins: Optional[dict[str, str]] = None,
        options: Optional[list[tuple[str, str]]] = None,
        error_text: str = INVALID_LOGIN_MESSAGE,
    ) -> None:
        self.valid_logins = dict(valid_logins or {"jdoe": "s3cret"})
        self.options = list(options or [])
        self.error_text = error_text

        self.url = LOGIN_URL
        self.fields: dict[str, str] = {}
        self.error_label: Optional[str] = None
        self.calls: list[tuple] = []
        self.navigations = 0
        self.closed = 0
        self.debug_saved: list[str] = []
        self.fail_on: dict[str, BaseException] = {}
        self._in_navigation = False

    def _maybe_fail(self, op: str) -> None:
        exc = self.fail_on.get(op)
        if exc is not None:
            raise exc

    def current_url(self) -> str:
        return self.url

    def goto(self, url: str) -> None:
        self.calls.append(("goto", url))
        self._maybe_fail("goto")
        self.url = url

    def read_text(self, selector: str) -> Optional[str]:
        self.calls.append(("read_text", selector))
        if selector == "#lblEeMsg":
            return self.error_label
        return None

    def read_options(self, selector: str) -> list[tuple[str, str]]:
        self.calls.append(("read_options", selector))
        self._maybe_fail("read_options")
        assert self.url == RECORDS_URL
        return list(self.options)

    def fill(self, selector: str, text: str) -> None:
        self.calls.append(("fill", selector))
        self._maybe_fail("fill")
        self.fields[selector] = text

    def click(self, selector: str) -> None:
        self.calls.append(("click", selector))
        self._maybe_fail("click")
        if selector == "#btnee":
            user = self.fields.get("#txtEeUserName", "")
            pwd = self.fields.get("#txtEePassword", "")
            if self.valid_logins.get(user) == pwd:
                self.url = HOME_URL
                self.error_label = None
            else:
                self.url = LOGIN_URL
                self.error_label = self.error_text
        elif selector == "#btn_showchecks":
            assert self._in_navigation, "show button clicked outside expect_navigation()"

    def set_value(self, selector: str, value: str) -> None:
        self.calls.append(("set_value", selector, value))
        self.fields[selector] = value

    @contextmanager
    def expect_navigation(self) -> Iterator[None]:
        self.calls.append(("expect_navigation",))
        self._in_navigation = True
        try:
            yield
        finally:
            self._in_navigation = False
        self._maybe_fail("navigation")
        self.navigations += 1

    def export_pdf(self, path: Path) -> None:
        self.calls.append(("export_pdf", Path(path).name))
        self._maybe_fail("export_pdf")
        Path(path).write_text(self.fields.get("#drp_CheckDate", ""), encoding="utf-8")

    def save_debug(self, name_prefix: str) -> None:
        self.debug_saved.append(name_prefix)

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def fake_portal() -> FakePortal:
    return FakePortal(
        options=[
            ("", "Choose one"),
            ("7", "Paycheck 01/15/2023"),
            ("9", "Paycheck 02/01/2023"),
        ]
    )


@pytest.fixture
def portal_factory():
    return FakePortal
