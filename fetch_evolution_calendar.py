#!/usr/bin/env python3
"""
Fetch the Swift Evolution proposal list and print it as an ICS feed.

Data flow:
  1. GET https://data.swift.org/swift-evolution/proposals  → proposal JSON
     (or read a local copy given as the only argument)
  2. Build VEVENTs for proposals under review
  3. Print the VCALENDAR to stdout

Environment:
  EVOLUTION_CALENDAR_POLICY  "range" (default) or "review"
  EVOLUTION_CALENDAR_DEBUG   1/true/yes/on to put a blank line between blocks

If the proposals can't be fetched or decoded, an empty VCALENDAR is still
printed before the error and the exit status is 1.
"""

import os
import sys
import argparse
from pathlib import Path

import requests

from ics_calendar import CRLF, ICalendar
from proposal_events import EventPolicy, ProposalDecodeError, build_calendar, decode_proposals

PROPOSALS_URL = "https://data.swift.org/swift-evolution/proposals"
USER_AGENT = "Mozilla/5.0 (Swift-Evolution-Calendar)"
TRUTHY = {"1", "true", "yes", "on"}


def fetch_proposals_json(url: str = PROPOSALS_URL) -> bytes:
    """Download the proposal list."""
    with requests.Session() as session:
        session.headers.update({"User-Agent": USER_AGENT})
        resp = session.get(url, timeout=30)
        resp.raise_for_status()
        return resp.content


def load_proposals_json(path: str | None) -> bytes:
    """Read a local copy if one was given, otherwise fetch the published list."""
    if path is None:
        return fetch_proposals_json()
    return Path(path).read_bytes()


def policy_from_env() -> EventPolicy:
    name = os.environ.get("EVOLUTION_CALENDAR_POLICY", EventPolicy.RANGE.value)
    return EventPolicy(name.strip().lower())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Swift Evolution proposals → ICS feed on stdout",
        add_help=False,
    )
    parser.add_argument("proposals", nargs="?", default=None, help="Local proposals.json")
    argv = sys.argv[1:] if argv is None else argv
    # Checked before argparse, which would swallow a "--" separator.
    if len(argv) > 1 or (argv and argv[0].startswith("-")):
        parser.error(f"unrecognized arguments: {' '.join(argv)}")
    args = parser.parse_args(argv)
    try:
        args.policy = policy_from_env()
    except ValueError:
        parser.error(f"unknown EVOLUTION_CALENDAR_POLICY: {os.environ['EVOLUTION_CALENDAR_POLICY']}")
    args.debug = os.environ.get("EVOLUTION_CALENDAR_DEBUG", "").strip().lower() in TRUTHY
    return args


def write_calendar(calendar: ICalendar, debug: bool = False) -> None:
    print(calendar.serialize(debug), end=CRLF)
    sys.stdout.flush()


def main(argv: list[str] | None = None):
    args = parse_args(argv)

    calendar = ICalendar()
    try:
        data = load_proposals_json(args.proposals)
        proposals = decode_proposals(data)
    except (requests.RequestException, OSError, ProposalDecodeError) as exc:
        write_calendar(calendar, args.debug)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    calendar = build_calendar(proposals, args.policy)

    write_calendar(calendar, args.debug)
    print(f"Found {len(proposals)} proposals, built {calendar.event_count} events", file=sys.stderr)


if __name__ == "__main__":
    main()
