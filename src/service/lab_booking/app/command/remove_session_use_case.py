from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.service.booking_release import delete_session_cascade
from src.service.lab_booking.domain.value_object.caller import Caller


class RemoveSessionUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, session_id: int, caller: Caller) -> None:
        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session:
                raise NotFoundError('Session not found')
            caller.ensure_owner_or_admin(session.created_by_id, 'remove this session')

            removed = await delete_session_cascade(self.uow, session_id=session_id)
            await self.uow.commit()

        Logger.base.info(
            f'🗑️ [SESSION] Removed session {session_id} with {removed} bookings'
        )
