from datetime import datetime, timedelta, timezone

from soma_exam.core.services.countdown import (
    CountdownUrgency,
    ExpiryLatch,
    countdown_urgency,
    format_countdown,
    remaining_seconds,
)

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_remaining_seconds_rounds_up_partial_seconds():
    assert remaining_seconds(START, START, 1) == 60
    assert remaining_seconds(START + timedelta(seconds=0.2), START, 1) == 60
    assert remaining_seconds(START + timedelta(seconds=59.9), START, 1) == 1
    assert remaining_seconds(START + timedelta(seconds=60), START, 1) == 0


def test_remaining_seconds_is_clamped_at_zero():
    assert remaining_seconds(START + timedelta(hours=2), START, 30) == 0


def test_format_countdown():
    assert format_countdown(0) == "00:00"
    assert format_countdown(65) == "01:05"
    assert format_countdown(3600) == "60:00"
    assert format_countdown(-3) == "00:00"


def test_countdown_urgency_thresholds():
    assert countdown_urgency(301) is CountdownUrgency.NORMAL
    assert countdown_urgency(300) is CountdownUrgency.NORMAL
    assert countdown_urgency(299) is CountdownUrgency.LOW
    assert countdown_urgency(59) is CountdownUrgency.CRITICAL
    assert countdown_urgency(0) is CountdownUrgency.CRITICAL


def test_expiry_latch_trips_once():
    latch = ExpiryLatch()
    assert not latch.is_tripped()
    assert latch.trip() is True
    assert latch.trip() is False
    assert latch.is_tripped()
