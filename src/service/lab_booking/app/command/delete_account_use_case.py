from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.service.booking_release import (
    delete_session_cascade,
    release_seat_bookings,
)
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.domain.value_object.caller import Caller


class DeleteAccountUseCase:
    """
    Delete an account and everything it owns, children first:
    attendance, the user's bookings (seats and equipment handed back),
    sessions the user created (with their own cascade), then the user.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, equipment_ledger: EquipmentReservationLedger
    ) -> None:
        self.uow = uow
        self.equipment_ledger = equipment_ledger

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        equipment_ledger: EquipmentReservationLedger = Depends(
            Provide[Container.equipment_ledger]
        ),
    ) -> Self:
        return cls(uow=uow, equipment_ledger=equipment_ledger)

    @Logger.io
    async def execute(self, *, user_id: str, caller: Caller) -> None:
        if caller.user_id != user_id and not caller.is_admin:
            raise ForbiddenError('Only admins can delete other accounts')

        async with self.uow:
            if not await self.uow.user_repo.get_by_id(user_id=user_id):
                raise NotFoundError('User not found')

            await self.uow.attendance_repo.delete_by_user(user_id=user_id)
            bookings = await self.uow.seat_booking_repo.list_by_user(user_id=user_id)
            # shared lab locks before the capacity writes, as unbook takes them
            for session_id in sorted({booking.session_id for booking in bookings}):
                session = await self.uow.session_repo.get_by_id(session_id=session_id)
                if session:
                    await self.uow.lab_repo.get_for_share(lab_id=session.lab_id)
            await release_seat_bookings(self.uow, self.equipment_ledger, bookings)

            sessions = await self.uow.session_repo.list_by_creator(user_id=user_id)
            for session in sessions:
                await delete_session_cascade(self.uow, session_id=session.id or 0)

            await self.uow.user_repo.delete(user_id=user_id)
            await self.uow.commit()

        Logger.base.info(
            f'🗑️ [ACCOUNT] Deleted {user_id} with {len(bookings)} bookings '
            f'and {len(sessions)} sessions'
        )
