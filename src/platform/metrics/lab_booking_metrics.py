from contextlib import contextmanager
import time
from typing import Iterator

from prometheus_client import Counter, Histogram


class LabBookingMetrics:
    """
    Lab booking business metrics

    Exposed on /metrics; label values are low-cardinality operation and
    outcome names, never user or session ids.
    """

    def __init__(self):
        # ========== Booking Engine ==========
        self.booking_requests = Counter(
            'lab_booking_requests_total',
            'Seat booking operations by outcome',
            ['operation', 'result'],  # operation: book/unbook/switch/cancel/approve/reject
        )

        self.booking_duration = Histogram(
            'lab_booking_duration_seconds',
            'Seat booking transaction duration',
            ['operation'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        # ========== Notifications ==========
        self.emails = Counter(
            'lab_booking_emails_total',
            'Outbound e-mails by kind and outcome',
            ['kind', 'result'],  # result: sent/failed/skipped
        )

        # ========== Reminder Job ==========
        self.reminder_scans = Counter(
            'lab_booking_reminder_scans_total',
            'Reminder scan runs',
            ['result'],
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, operation: str, result: str, duration: float) -> None:
        self.booking_requests.labels(operation=operation, result=result).inc()
        self.booking_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track_booking(self, operation: str) -> Iterator[None]:
        """Time a booking transaction; the result label is the error class name on failure"""
        start = time.perf_counter()
        result = 'ok'
        try:
            yield
        except Exception as e:
            result = type(e).__name__
            raise
        finally:
            self.record_booking(
                operation=operation, result=result, duration=time.perf_counter() - start
            )

    def record_email(self, *, kind: str, result: str) -> None:
        self.emails.labels(kind=kind, result=result).inc()

    def record_reminder_scan(self, *, result: str) -> None:
        self.reminder_scans.labels(result=result).inc()


# Global metrics instance
metrics = LabBookingMetrics()
