from datetime import datetime, timezone

import pytest

from ics_format import (
    FOLD_OCTETS,
    date_only,
    date_time_utc,
    day_duration,
    escape,
    fold,
    parse_date_only,
    parse_review_start,
)


def unescape(text: str) -> str:
    out = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars)
            out.append("\n" if nxt == "n" else nxt)
        else:
            out.append(ch)
    return "".join(out)


def test_parse_date_only() -> None:
    assert parse_date_only("2020-12-31") == datetime(2020, 12, 31, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", [None, "", "2020-13-01", "2020-02-30", "20200101",
                                  "2020-1-1", "2020-01-01T00:00:00", " 2020-01-01"])
def test_parse_date_only_rejects(text) -> None:
    assert parse_date_only(text) is None


def test_parse_review_start_standard_time() -> None:
    assert parse_review_start("2020-01-01") == datetime(2020, 1, 1, 17, tzinfo=timezone.utc)


def test_parse_review_start_daylight_time() -> None:
    assert parse_review_start("2020-07-01") == datetime(2020, 7, 1, 16, tzinfo=timezone.utc)


def test_parse_review_start_other_zone() -> None:
    start = parse_review_start("2020-01-01", zone="Europe/London")
    assert start == datetime(2020, 1, 1, 9, tzinfo=timezone.utc)


def test_parse_review_start_rejects_bad_date() -> None:
    assert parse_review_start("next week") is None
    assert parse_review_start(None) is None


def test_formatting_uses_utc_fields() -> None:
    dt = parse_review_start("2020-12-31")
    assert date_time_utc(dt) == "20201231T170000Z"
    assert date_only(datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "20200102"
    assert date_time_utc(datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "20200102T030405Z"


def test_day_duration() -> None:
    start = parse_date_only("2020-01-01")
    assert day_duration(start, parse_date_only("2020-01-15")) == "P14D"
    assert day_duration(start, start) == "P0D"
    assert day_duration(start, None) == "P0D"


def test_escape() -> None:
    assert escape("  Foo, Bar\n") == "Foo\\, Bar"
    assert escape("a;b") == r"a\;b"
    assert escape("line 1\nline 2") == "line 1\\nline 2"


def test_escape_backslash_first() -> None:
    assert escape(r"C:\path;x") == r"C:\\path\;x"
    assert escape(r"\,") == r"\\\,"


def test_fold_short_text_unchanged() -> None:
    assert fold("short") == "short"
    assert fold("") == ""


def test_fold_ascii_chunks() -> None:
    folded = fold("x" * 150)
    chunks = folded.split("\n\t")
    assert [len(c) for c in chunks] == [72, 72, 6]


def test_fold_counts_octets_and_keeps_characters_whole() -> None:
    text = "é" * 50  # two octets each
    chunks = fold(text).split("\n\t")
    assert [len(c.encode("utf-8")) for c in chunks] == [72, 28]
    assert "".join(chunks) == text


def test_fold_never_splits_multibyte_character() -> None:
    text = "a" + "€" * 30  # "€" is three octets; 1 + 3 * 23 = 70, the next one would be 73
    chunks = fold(text).split("\n\t")
    assert chunks[0] == "a" + "€" * 23
    assert all(len(c.encode("utf-8")) <= FOLD_OCTETS for c in chunks)
    assert "".join(chunks) == text


@pytest.mark.parametrize("text", [
    "Foo, Bar\n",
    "  A title; with \\ every, reserved\ncharacter  ",
    "Long " * 40,
    "Ünïcödé title, über lang " * 5,
])
def test_fold_escape_unfolds_to_trimmed_original(text) -> None:
    folded = fold(escape(text))
    assert all(len(c.encode("utf-8")) <= FOLD_OCTETS for c in folded.split("\n\t"))
    assert unescape(folded.replace("\n\t", "")) == text.strip()
