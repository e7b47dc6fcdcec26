"""Tests for ID and time helpers"""
from datetime import datetime, timedelta, timezone

from election.utils.idgen import generate_correlation_id, generate_event_id, generate_id
from election.utils.time import format_iso, parse_iso, to_utc, utc_now


def test_generate_id_prefix():
    assert generate_id("EVT").startswith("EVT-")
    assert len(generate_id()) == 12
    assert generate_event_id() != generate_event_id()


def test_correlation_id_format():
    assert generate_correlation_id().startswith("COR-")


def test_iso_round_trip():
    now = utc_now()
    text = format_iso(now)
    assert text.endswith("Z")
    assert parse_iso(text) == now


def test_naive_datetimes_are_utc():
    naive = datetime(2026, 1, 2, 3, 4, 5)
    assert format_iso(naive) == "2026-01-02T03:04:05Z"
    assert parse_iso("2026-01-02T03:04:05").tzinfo is not None
    assert parse_iso("2026-01-02T03:04:05") == naive.replace(tzinfo=timezone.utc)


def test_offsets_are_normalised_to_utc():
    plus_two = datetime(2026, 10, 18, 22, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_iso(plus_two) == "2026-10-18T20:00:00Z"
    assert to_utc(plus_two) == datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
    assert to_utc(plus_two).tzinfo == timezone.utc
