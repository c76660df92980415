from datetime import datetime, timedelta, timezone

import pytest

from src.service.lab_booking.domain.booking_errors import (
    InvalidSessionWindowError,
    LockedOutError,
)
from src.service.lab_booking.domain.booking_policy import (
    as_utc,
    intervals_overlap,
    is_locked_out,
    validate_session_window,
)
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession


START = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestLockout:
    def test_exactly_at_lock_time_is_still_open(self):
        assert not is_locked_out(START, START - timedelta(minutes=15))

    def test_one_second_after_lock_time_is_locked(self):
        assert is_locked_out(START, START - timedelta(minutes=15) + timedelta(seconds=1))

    def test_session_raises_when_locked(self):
        """
        Given: a session starting in 14 minutes
        When: a student tries to change a booking
        Then: LockedOutError (403)
        """
        # Arrange
        session = LabSession(lab_id=1, start_at=START, end_at=START + timedelta(hours=1))

        # Act & Assert
        with pytest.raises(LockedOutError) as exc_info:
            session.ensure_open(START - timedelta(minutes=14))
        assert exc_info.value.status_code == 403

    def test_naive_datetimes_are_taken_as_utc(self):
        naive = datetime(2025, 3, 3, 9, 0)

        assert as_utc(naive) == START


@pytest.mark.unit
class TestOverlap:
    def test_touching_sessions_overlap(self):
        end = START + timedelta(minutes=55)

        assert intervals_overlap(START, end, end, end + timedelta(hours=1))

    def test_separate_sessions_do_not_overlap(self):
        end = START + timedelta(minutes=55)

        assert not intervals_overlap(
            START, end, end + timedelta(minutes=1), end + timedelta(hours=1)
        )

    def test_contained_session_overlaps(self):
        assert intervals_overlap(
            START,
            START + timedelta(hours=3),
            START + timedelta(hours=1),
            START + timedelta(hours=2),
        )


@pytest.mark.unit
class TestSessionWindow:
    def test_end_must_follow_start(self):
        with pytest.raises(InvalidSessionWindowError):
            validate_session_window(START, START)

    def test_minimum_duration(self):
        with pytest.raises(InvalidSessionWindowError):
            validate_session_window(START, START + timedelta(minutes=4))

    def test_minimum_duration_is_inclusive(self):
        validate_session_window(START, START + timedelta(minutes=5))

    def test_new_session_starts_with_full_capacity(self):
        session = LabSession.create(
            lab_id=1,
            start_at=START,
            end_at=START + timedelta(minutes=55),
            total_seats=19,
            created_by_id='teacher_1',
        )

        assert session.capacity == 19
        assert session.created_by_id == 'teacher_1'
