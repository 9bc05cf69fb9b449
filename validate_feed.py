#!/usr/bin/env python3
"""Validate generated ICS feeds (local files or URLs)."""
import re
import sys
from pathlib import Path

import requests

MAX_LINE_OCTETS = 75


def fetch_feed(source: str) -> str:
    if source.startswith(("http://", "https://")):
        resp = requests.get(source, timeout=30)
        resp.raise_for_status()
        return resp.text
    return Path(source).read_bytes().decode("utf-8")


def validate(text: str) -> list[str]:
    """Return a list of problems found in an ICS document, empty if none."""
    events = text.count("BEGIN:VEVENT")
    events_end = text.count("END:VEVENT")
    alarms = text.count("BEGIN:VALARM")
    alarms_end = text.count("END:VALARM")
    has_vcal_start = text.strip().startswith("BEGIN:VCALENDAR")
    has_vcal_end = text.strip().endswith("END:VCALENDAR")
    has_version = "VERSION:2.0" in text
    has_prodid = "PRODID:" in text

    # Unfold before looking at properties.
    unfolded = re.sub(r"\r\n[ \t]", "", text)
    vevent_blocks = re.findall(r"BEGIN:VEVENT.*?END:VEVENT", unfolded, re.DOTALL)
    missing = {}
    for prop in ("UID", "DTSTAMP", "DTSTART", "SUMMARY"):
        pattern = re.compile(rf"^{prop}[:;]", re.MULTILINE)
        missing[prop] = sum(1 for v in vevent_blocks if not pattern.search(v))

    bare_lf = len(re.findall(r"(?<!\r)\n", text))
    long_lines = sum(
        1 for line in text.split("\r\n") if len(line.encode("utf-8")) > MAX_LINE_OCTETS
    )

    issues = []
    if not has_vcal_start:
        issues.append("missing BEGIN:VCALENDAR")
    if not has_vcal_end:
        issues.append("missing END:VCALENDAR")
    if not has_version:
        issues.append("missing VERSION:2.0")
    if not has_prodid:
        issues.append("missing PRODID")
    if events != events_end:
        issues.append(f"VEVENT mismatch: {events} begin vs {events_end} end")
    if alarms != alarms_end:
        issues.append(f"VALARM mismatch: {alarms} begin vs {alarms_end} end")
    for prop, count in missing.items():
        if count:
            issues.append(f"{count} events missing {prop}")
    if bare_lf:
        issues.append(f"{bare_lf} bare LF line endings")
    if long_lines:
        issues.append(f"{long_lines} lines longer than {MAX_LINE_OCTETS} octets")
    return issues


def main(argv: list[str] | None = None):
    sources = argv if argv is not None else sys.argv[1:]
    failed = False
    if not sources:
        print(f"Usage: {sys.argv[0]} FEED [FEED ...]", file=sys.stderr)
        sys.exit(1)
    for source in sources:
        try:
            text = fetch_feed(source)
        except (requests.RequestException, OSError, UnicodeDecodeError) as exc:
            print(f"{source} | FAIL {exc}")
            failed = True
            continue
        issues = validate(text)
        events = text.count("BEGIN:VEVENT")
        status = "PASS" if not issues else "FAIL"
        size_kb = len(text) / 1024
        detail = " | ".join(issues) if issues else ""
        print(f"{source} | {events:5d} events | {size_kb:7.1f} KB | {status} {detail}")
        failed = failed or bool(issues)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
