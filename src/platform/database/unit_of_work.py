"""
Unit of Work Pattern - one database session and transaction per operation

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories are bound to the UoW's shared session
- Use cases coordinate several repositories inside one UoW block
"""

from __future__ import annotations

import abc
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.lab_booking.app.interface.i_attendance_repo import IAttendanceRepo
    from src.service.lab_booking.app.interface.i_equipment_repo import IEquipmentRepo
    from src.service.lab_booking.app.interface.i_lab_repo import ILabRepo
    from src.service.lab_booking.app.interface.i_lab_session_repo import ILabSessionRepo
    from src.service.lab_booking.app.interface.i_lab_user_repo import ILabUserRepo
    from src.service.lab_booking.app.interface.i_seat_booking_repo import ISeatBookingRepo
    from src.service.lab_booking.app.interface.i_seat_repo import ISeatRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the lab booking service

    Usage:
        async with uow:
            session = await uow.session_repo.get_by_id(session_id=1)
            ...
            await uow.commit()
    """

    lab_repo: ILabRepo
    seat_repo: ISeatRepo
    session_repo: ILabSessionRepo
    seat_booking_repo: ISeatBookingRepo
    equipment_repo: IEquipmentRepo
    attendance_repo: IAttendanceRepo
    user_repo: ILabUserRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    ``session_factory`` is any callable returning an async context manager
    that yields an ``AsyncSession`` (``Database.session`` or an
    ``async_sessionmaker``). A fresh session is opened on every ``async with``.
    """

    def __init__(self, session_factory: Callable[[], AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self._stack: AsyncExitStack | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.lab_booking.driven_adapter.repo.attendance_repo_impl import (
            AttendanceRepoImpl,
        )
        from src.service.lab_booking.driven_adapter.repo.equipment_repo_impl import (
            EquipmentRepoImpl,
        )
        from src.service.lab_booking.driven_adapter.repo.lab_repo_impl import LabRepoImpl
        from src.service.lab_booking.driven_adapter.repo.lab_session_repo_impl import (
            LabSessionRepoImpl,
        )
        from src.service.lab_booking.driven_adapter.repo.lab_user_repo_impl import (
            LabUserRepoImpl,
        )
        from src.service.lab_booking.driven_adapter.repo.seat_booking_repo_impl import (
            SeatBookingRepoImpl,
        )
        from src.service.lab_booking.driven_adapter.repo.seat_repo_impl import SeatRepoImpl

        self._stack = AsyncExitStack()
        self.session = await self._stack.enter_async_context(self.session_factory())

        # Repositories share the session (and so the transaction)
        self.lab_repo = LabRepoImpl(session=self.session)
        self.seat_repo = SeatRepoImpl(session=self.session)
        self.session_repo = LabSessionRepoImpl(session=self.session)
        self.seat_booking_repo = SeatBookingRepoImpl(session=self.session)
        self.equipment_repo = EquipmentRepoImpl(session=self.session)
        self.attendance_repo = AttendanceRepoImpl(session=self.session)
        self.user_repo = LabUserRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._stack is not None:
                await self._stack.aclose()
                self._stack = None

    async def _commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
