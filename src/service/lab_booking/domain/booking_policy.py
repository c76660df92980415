"""
Time rules shared by the booking engine and the session lifecycle.

``utc_now`` is the single clock read by use cases; tests patch it per module.
"""

from datetime import datetime, timedelta, timezone

from src.platform.config.core_setting import settings
from src.service.lab_booking.domain.booking_errors import InvalidSessionWindowError


LOCKOUT_WINDOW = timedelta(minutes=settings.LOCKOUT_MINUTES)
MIN_SESSION_DURATION = timedelta(minutes=settings.MIN_SESSION_MINUTES)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (SQLite round-trips) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def lock_time(start_at: datetime) -> datetime:
    return as_utc(start_at) - LOCKOUT_WINDOW


def is_locked_out(start_at: datetime, now: datetime) -> bool:
    # exactly at lock time is still open
    return as_utc(now) > lock_time(start_at)


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    # touching endpoints count as overlapping
    return as_utc(start_a) <= as_utc(end_b) and as_utc(end_a) >= as_utc(start_b)


def validate_session_window(start_at: datetime, end_at: datetime) -> None:
    start_at, end_at = as_utc(start_at), as_utc(end_at)
    if end_at <= start_at:
        raise InvalidSessionWindowError('Session end must be after its start')
    if end_at - start_at < MIN_SESSION_DURATION:
        raise InvalidSessionWindowError(
            f'Session must last at least {settings.MIN_SESSION_MINUTES} minutes'
        )
