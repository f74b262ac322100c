from __future__ import annotations

import html as _html
import logging
import re
from typing import Iterable, Literal, Optional

from ..models import UNKNOWN_DATE, RecordEntry
from .driver import PageDriver
from .selectors import PortalSelectors


logger = logging.getLogger(__name__)

DateOrder = Literal["MDY", "DMY"]

_CHECK_DATE_RE = re.compile(r"(\d\d)/(\d\d)/(\d\d\d\d)")
_OPTION_RE = re.compile(r"<option\b([^>]*)>(.*?)</option>", re.I | re.S)
_VALUE_ATTR_RE = re.compile(r"\bvalue\s*=\s*(?:'([^']*)'|\"([^\"]*)\"|([^\s>]+))", re.I)
_TAG_RE = re.compile(r"<[^>]+>")


def normalize_date(label: str, *, date_order: DateOrder = "MDY") -> str:
    """
    Find a `NN/NN/YYYY` date in an option label and return it as `YYYY-MM-DD`.

    Returns `"unknown"` when the label has no such date. The digits are not validated as a calendar date.
    `date_order="DMY"` reads the groups as day/month/year, which reproduces the original portal script's
    output exactly (`"01/15/2023"` -> `"2023-15-01"`).
    """
    m = _CHECK_DATE_RE.search(label or "")
    if not m:
        return UNKNOWN_DATE
    first, second, year = m.group(1), m.group(2), m.group(3)
    if date_order == "DMY":
        return f"{year}-{second}-{first}"
    return f"{year}-{first}-{second}"


def build_record_entries(
    options: Iterable[tuple[str, str]],
    *,
    date_order: DateOrder = "MDY",
) -> list[RecordEntry]:
    entries = [
        RecordEntry(
            selector_value=value,
            display_label=text,
            normalized_date=normalize_date(text, date_order=date_order),
        )
        for value, text in options
    ]
    # The first option is a "choose one" placeholder with an empty value.
    return [e for e in entries if e.selector_value]


def parse_select_options_html(page_html: str, *, select_id: str) -> list[tuple[str, str]]:
    """
    Offline equivalent of `PageDriver.read_options()` for a saved page (e.g. a `--debug-dir` snapshot).
    """
    select_re = re.compile(
        rf"<select\b[^>]*\bid\s*=\s*[\"']?{re.escape(select_id)}[\"']?[^>]*>(.*?)</select>",
        re.I | re.S,
    )
    m = select_re.search(page_html or "")
    if not m:
        raise ValueError(f"No <select id={select_id!r}> found in page")

    out: list[tuple[str, str]] = []
    for attrs, inner in _OPTION_RE.findall(m.group(1)):
        text = " ".join(_html.unescape(_TAG_RE.sub("", inner)).split())
        vm = _VALUE_ATTR_RE.search(attrs)
        # Like the DOM: an option without a value attribute uses its text as the value.
        value = _html.unescape(next(g for g in vm.groups() if g is not None)) if vm else text
        out.append((value, text))
    return out


class ListingExtractor:
    def __init__(
        self,
        *,
        records_url: str,
        date_order: DateOrder = "MDY",
        selectors: Optional[PortalSelectors] = None,
    ) -> None:
        self.records_url = records_url
        self.date_order = date_order
        self.selectors = selectors or PortalSelectors()

    def list_records(self, driver: PageDriver) -> list[RecordEntry]:
        logger.info("Waiting for paycheck list...")
        driver.goto(self.records_url)
        options = driver.read_options(self.selectors.check_date_select)
        entries = build_record_entries(options, date_order=self.date_order)
        logger.info("Found %d paychecks (options=%d)", len(entries), len(options))
        unknown = sum(1 for e in entries if e.normalized_date == UNKNOWN_DATE)
        if unknown:
            logger.warning("%d paycheck label(s) had no recognizable date; saving them as '%s'.", unknown, UNKNOWN_DATE)
        return entries
