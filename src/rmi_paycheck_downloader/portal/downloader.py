from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..models import RecordEntry
from .driver import PageDriver
from .selectors import PortalSelectors


logger = logging.getLogger(__name__)

DEFAULT_FILE_PREFIX = "Lendio Paycheck - "


def paycheck_filename(entry: RecordEntry, *, prefix: str = DEFAULT_FILE_PREFIX) -> str:
    return f"{prefix}{entry.normalized_date}.pdf"


class RecordDownloader:
    """
    Shows one paycheck in the pay-history page and prints it to PDF.

    Two paychecks with the same date map to the same file name; the later one overwrites the earlier.
    """

    def __init__(self, *, file_prefix: str = DEFAULT_FILE_PREFIX, selectors: Optional[PortalSelectors] = None) -> None:
        self.file_prefix = file_prefix
        self.selectors = selectors or PortalSelectors()

    def download_one(self, driver: PageDriver, entry: RecordEntry, destination: Union[str, Path]) -> Path:
        s = self.selectors
        with driver.expect_navigation():
            driver.set_value(s.check_date_select, entry.selector_value)
            driver.click(s.show_check_button)

        out_path = Path(destination) / paycheck_filename(entry, prefix=self.file_prefix)
        if out_path.exists():
            logger.info("Overwriting %s (duplicate check date %s)", out_path.name, entry.normalized_date)
        driver.export_pdf(out_path)
        logger.debug("Saved %s (value=%s label=%r)", out_path, entry.selector_value, entry.display_label)
        return out_path
