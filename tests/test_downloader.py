from __future__ import annotations

from pathlib import Path

import pytest

from rmi_paycheck_downloader.models import RecordEntry
from rmi_paycheck_downloader.portal.downloader import RecordDownloader, paycheck_filename


def _entry(value: str, date: str) -> RecordEntry:
    return RecordEntry(selector_value=value, display_label=f"Paycheck {date}", normalized_date=date)


def test_paycheck_filename() -> None:
    assert paycheck_filename(_entry("7", "2023-01-15")) == "Lendio Paycheck - 2023-01-15.pdf"
    assert paycheck_filename(_entry("8", "unknown")) == "Lendio Paycheck - unknown.pdf"
    assert paycheck_filename(_entry("7", "2023-01-15"), prefix="Pay ") == "Pay 2023-01-15.pdf"


def test_download_one_selects_shows_and_exports(fake_portal, tmp_path: Path) -> None:
    out = RecordDownloader().download_one(fake_portal, _entry("7", "2023-01-15"), tmp_path)

    assert out == tmp_path / "Lendio Paycheck - 2023-01-15.pdf"
    assert out.read_text(encoding="utf-8") == "7"
    assert fake_portal.calls == [
        ("expect_navigation",),
        ("set_value", "#drp_CheckDate", "7"),
        ("click", "#btn_showchecks"),
        ("export_pdf", out.name),
    ]
    assert fake_portal.navigations == 1


def test_three_distinct_dates_yield_three_files(fake_portal, tmp_path: Path) -> None:
    downloader = RecordDownloader()
    for value, date in (("1", "2023-01-15"), ("2", "2023-02-01"), ("3", "2023-02-15")):
        downloader.download_one(fake_portal, _entry(value, date), tmp_path)

    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "Lendio Paycheck - 2023-01-15.pdf",
        "Lendio Paycheck - 2023-02-01.pdf",
        "Lendio Paycheck - 2023-02-15.pdf",
    ]


def test_duplicate_dates_overwrite(fake_portal, tmp_path: Path) -> None:
    downloader = RecordDownloader()
    downloader.download_one(fake_portal, _entry("1", "2023-01-15"), tmp_path)
    downloader.download_one(fake_portal, _entry("2", "2023-01-15"), tmp_path)

    files = list(tmp_path.iterdir())
    assert [p.name for p in files] == ["Lendio Paycheck - 2023-01-15.pdf"]
    assert files[0].read_text(encoding="utf-8") == "2"


def test_export_failure_propagates(fake_portal, tmp_path: Path) -> None:
    fake_portal.fail_on["export_pdf"] = OSError("disk full")
    with pytest.raises(OSError):
        RecordDownloader().download_one(fake_portal, _entry("1", "2023-01-15"), tmp_path)
