"""
Turn Swift Evolution proposal records into VEVENT blocks.

Two policies decide which proposals become events:
  RANGE   any proposal with a valid start/end date pair; all-day event with
          an alarm on the first and on the final day
  REVIEW  proposals scheduled for or in active review; event at 9 a.m.
          Pacific on the start date with a single alarm

Proposals a policy rejects are skipped without a message.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from ics_calendar import CALENDAR_ID, ICalendar
from ics_format import (
    date_only,
    date_time_utc,
    day_duration,
    escape,
    fold,
    parse_date_only,
    parse_review_start,
)

PROPOSAL_BASE_URL = "https://github.com/apple/swift-evolution/blob/main/proposals/"
REVIEW_STATES = {"scheduledForReview", "activeReview"}


class ProposalDecodeError(ValueError):
    """The proposal JSON is not an array of proposal objects."""


class EventPolicy(Enum):
    RANGE = "range"
    REVIEW = "review"


@dataclass(frozen=True)
class ProposalStatus:
    state: str | None = None
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class Proposal:
    id: str
    link: str
    title: str
    status: ProposalStatus


@dataclass(frozen=True)
class ReviewWindow:
    start: datetime
    end: datetime | None = None

    @property
    def duration(self) -> str:
        return day_duration(self.start, self.end)


def _require_str(obj: dict, key: str, index: int) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise ProposalDecodeError(f"proposal {index}: '{key}' must be a string")
    return value


def _optional_str(obj: dict, key: str, index: int) -> str | None:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise ProposalDecodeError(f"proposal {index}: 'status.{key}' must be a string")
    return value


def decode_proposals(data: bytes | str) -> list[Proposal]:
    """Decode the proposals JSON. Fails as a whole; there is no partial result."""
    try:
        items = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ProposalDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise ProposalDecodeError("expected a JSON array of proposals")

    proposals = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ProposalDecodeError(f"proposal {i}: expected an object")
        status = item.get("status")
        if not isinstance(status, dict):
            raise ProposalDecodeError(f"proposal {i}: 'status' must be an object")
        proposals.append(Proposal(
            id=_require_str(item, "id", i),
            link=_require_str(item, "link", i),
            title=_require_str(item, "title", i),
            status=ProposalStatus(
                state=_optional_str(status, "state", i),
                start=_optional_str(status, "start", i),
                end=_optional_str(status, "end", i),
            ),
        ))
    return proposals


def is_in_review(status: ProposalStatus) -> bool:
    # The legacy feed spells states with a leading dot, e.g. ".activeReview".
    return (status.state or "").lstrip(".") in REVIEW_STATES


def review_window(proposal: Proposal, policy: EventPolicy) -> ReviewWindow | None:
    """Return the window a proposal is reviewed in, or None if it has none."""
    status = proposal.status
    if policy is EventPolicy.REVIEW:
        if not is_in_review(status):
            return None
        start = parse_review_start(status.start)
        if start is None:
            return None
        return ReviewWindow(start)

    start = parse_date_only(status.start)
    end = parse_date_only(status.end)
    if start is None or end is None or start > end:
        return None
    return ReviewWindow(start, end)


def build_event(proposal: Proposal, policy: EventPolicy = EventPolicy.RANGE,
                now: datetime | None = None) -> str | None:
    """
    Build a VEVENT block for `proposal`, or None if `policy` rejects it.

    VEVENT must have UID, DTSTAMP, and DTSTART.
    VALARM must have ACTION and TRIGGER.
    """
    window = review_window(proposal, policy)
    if window is None:
        return None
    stamp = date_time_utc(now or datetime.now(timezone.utc))

    if policy is EventPolicy.REVIEW:
        dtstart = f"DTSTART:{date_time_utc(window.start)}"
        triggers = ["PT0S"]
    else:
        dtstart = f"DTSTART;VALUE=DATE:{date_only(window.start)}"
        triggers = ["PT0S", window.duration]

    lines = [
        "BEGIN:VEVENT",
        f"UID:{CALENDAR_ID}-{escape(proposal.id)}",
        f"DTSTAMP:{stamp}",
        f"SUMMARY:{escape(proposal.id)}: ",
        f"\t{fold(escape(proposal.title))}",
        f"URL:{PROPOSAL_BASE_URL}",
        f"\t{fold(escape(proposal.link))}",
        dtstart,
        "TRANSP:TRANSPARENT",
    ]
    for trigger in triggers:
        lines += [
            "BEGIN:VALARM",
            "ACTION:AUDIO",
            f"TRIGGER:{trigger}",
            "END:VALARM",
        ]
    lines.append("END:VEVENT")
    return "\n".join(lines)


def build_calendar(proposals: list[Proposal], policy: EventPolicy = EventPolicy.RANGE,
                   now: datetime | None = None) -> ICalendar:
    """Build events for all proposals and insert them in input order."""
    now = now or datetime.now(timezone.utc)
    calendar = ICalendar()
    for proposal in proposals:
        vevent = build_event(proposal, policy, now)
        if vevent:
            calendar.insert(vevent)
    return calendar
