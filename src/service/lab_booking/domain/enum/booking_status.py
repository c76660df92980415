from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = 'CONFIRMED'
    PENDING_APPROVAL = 'PENDING_APPROVAL'
    REJECTED = 'REJECTED'
