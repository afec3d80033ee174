"""
Command-line interface: parse a pasted timetable and export it to file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from . import __version__
from .clipboard_html import html_to_text, looks_like_html
from .export import export
from .filters import is_active_in_week
from .institutions import INSTITUTIONS, get_default_institution, get_institution_by_id
from .selector import parse_schedule_report
from .state import DATA, SELECTED_UNIVERSITY, WEEK, JsonFileStore


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input file not found: {p}")
    return p.read_text(encoding="utf-8", errors="ignore")


def _list_institutions() -> None:
    print("ID    | Short | Name")
    print("-" * 60)
    for profile in INSTITUTIONS:
        print(f"{profile.id:<5} | {profile.short_name:<5} | {profile.name}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Parse a timetable copied from a DUT / UFL student portal and export it "
            "to ICS / CSV / JSON."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "input",
        nargs="?",
        help="Text file with the pasted table, or '-' for stdin.",
    )
    parser.add_argument(
        "-u",
        "--university",
        choices=[p.id for p in INSTITUTIONS],
        help="Institution profile. Default: last one saved in --state, else dut.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="tkb",
        help="Output path (without extension). Default: tkb",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="json",
        help="Export format. Default: json",
    )
    merge = parser.add_mutually_exclusive_group()
    merge.add_argument(
        "--merge",
        dest="merge",
        action="store_true",
        default=None,
        help="Merge records that only differ in date range (Gộp mốc thời gian).",
    )
    merge.add_argument("--no-merge", dest="merge", action="store_false")
    parser.add_argument(
        "--html",
        action="store_true",
        help="Treat the input as a saved HTML page (auto-detected when it starts with a tag).",
    )
    parser.add_argument(
        "--week",
        type=int,
        help="Only export courses active in this week number.",
    )
    parser.add_argument(
        "--semester-start",
        metavar="YYYY-MM-DD",
        help="(ICS) Monday of week 1, needed for week-numbered institutions such as DUT.",
    )
    parser.add_argument(
        "--state",
        metavar="PATH",
        help="JSON file remembering the selected institution, pasted text and week.",
    )
    parser.add_argument(
        "--list-institutions",
        action="store_true",
        help="List known institutions then exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped lines.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
    )

    if args.list_institutions:
        _list_institutions()
        return 0

    store = JsonFileStore(args.state) if args.state else None

    if args.input:
        try:
            text = _read_input(args.input)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    elif store is not None and store.get(DATA):
        text = store.get(DATA) or ""
    else:
        print("Error: no input. Pass a file, '-' for stdin, or a --state with saved data.", file=sys.stderr)
        return 1

    semester_start = None
    if args.semester_start:
        try:
            semester_start = date.fromisoformat(args.semester_start)
        except ValueError:
            print(f"Error: invalid --semester-start: {args.semester_start}", file=sys.stderr)
            return 1

    if args.html or looks_like_html(text):
        text = html_to_text(html_content=text)

    if args.university:
        profile = get_institution_by_id(args.university)
    else:
        profile = get_default_institution(store)

    report = parse_schedule_report(text, profile, merge=args.merge)
    courses = report.courses
    if args.week is not None:
        courses = [c for c in courses if is_active_in_week(c, args.week)]

    if report.skipped_lines:
        print(f"Skipped {report.skipped_lines} unrecognised line(s).", file=sys.stderr)
    for warning in report.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if store is not None:
        store.set(SELECTED_UNIVERSITY, profile.id)
        store.set(DATA, text)
        if args.week is not None:
            store.set(WEEK, str(args.week))

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    export(courses, out_path, args.format, profile, semester_start)
    print(f"Exported {len(courses)} course(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
