#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def _read_text(path: str) -> str:
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"File not found: {p}")
    return p.read_text(encoding="utf-8", errors="replace")


def main(argv: list[str] | None = None) -> int:
    _ensure_src_on_path()

    from rmi_paycheck_downloader.portal.downloader import paycheck_filename
    from rmi_paycheck_downloader.portal.listing import build_record_entries, parse_select_options_html

    p = argparse.ArgumentParser(
        prog="parse_paycheck_snapshot",
        description=(
            "Parse a saved pay-history page (from --debug-dir *.html) into the paychecks the downloader would save.\n"
            "This is intended for debugging listing regressions offline (no Playwright, no secrets)."
        ),
    )
    p.add_argument("--file", required=True, help="Path to a debug .html file captured from the pay history page")
    p.add_argument("--select-id", default="drp_CheckDate", help="Id of the check-date <select> (default: drp_CheckDate)")
    p.add_argument("--date-order", choices=("MDY", "DMY"), default="MDY", help="How dates are written in the labels")
    p.add_argument("--out", default="", help="Optional output JSON path (otherwise prints to stdout)")
    args = p.parse_args(argv)

    options = parse_select_options_html(_read_text(args.file), select_id=args.select_id)
    entries = build_record_entries(options, date_order=args.date_order)
    payload = {
        "paychecks": [dict(e.model_dump(), file_name=paycheck_filename(e)) for e in entries],
    }
    out_json = json.dumps(payload, indent=2, sort_keys=False)
    if args.out:
        Path(args.out).write_text(out_json, encoding="utf-8")
    else:
        print(out_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
