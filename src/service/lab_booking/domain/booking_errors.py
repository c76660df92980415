"""
Lab booking error taxonomy.

Every error maps onto one of the platform HTTP categories so the registered
exception handlers render it without extra wiring. The ``code`` rendered next to
the message tells apart errors sharing a status, e.g. a full session from a
taken seat.
"""

from src.platform.exception.exceptions import ConflictError, DomainError, ForbiddenError


# ---- 400 -------------------------------------------------------------------


class InvalidSeatError(DomainError):
    code = 'invalid_seat'

    def __init__(self, seat_name: str) -> None:
        super().__init__(f'Invalid seat "{seat_name}" for this lab layout')
        self.seat_name = seat_name


class InvalidLabConfigError(DomainError):
    code = 'invalid_lab_config'

    def __init__(self, reason: str) -> None:
        super().__init__(f'Invalid lab configuration: {reason}')


class InvalidSessionWindowError(DomainError):
    code = 'invalid_session_window'


class LayoutConflictError(DomainError):
    code = 'layout_conflict'

    def __init__(self, affected: list[str]) -> None:
        super().__init__(
            'Cannot save layout: these bookings in upcoming sessions use seats that would no '
            f'longer exist: {", ".join(affected)}'
        )
        self.affected = affected


class InsufficientEquipmentError(DomainError):
    code = 'insufficient_equipment'

    def __init__(self, equipment_name: str, remaining: int, requested: int) -> None:
        super().__init__(
            f'Not enough {equipment_name} available: {remaining} left, {requested} requested'
        )


class ReservationsExistError(DomainError):
    code = 'reservations_exist'


class BelowReservedError(DomainError):
    code = 'below_reserved'


class ExceedsInventoryError(DomainError):
    code = 'exceeds_inventory'


# ---- 403 -------------------------------------------------------------------


class LockedOutError(ForbiddenError):
    code = 'locked_out'

    def __init__(self, minutes: int = 15) -> None:
        super().__init__(f'Bookings close {minutes} minutes before the session starts')


# ---- 409 -------------------------------------------------------------------


class SessionOverlapError(ConflictError):
    code = 'session_overlap'

    def __init__(self) -> None:
        super().__init__('Session overlaps with an existing session in this lab')


class AlreadyBookedError(ConflictError):
    code = 'already_booked'

    def __init__(self) -> None:
        super().__init__('You already have a seat in this session')


class SeatTakenError(ConflictError):
    code = 'seat_taken'

    def __init__(self, seat_name: str) -> None:
        super().__init__(f'Seat {seat_name} is already booked')


class SessionFullError(ConflictError):
    code = 'session_full'

    def __init__(self) -> None:
        super().__init__('Session is full')
