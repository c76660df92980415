from datetime import datetime
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import SessionOverlapError
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.value_object.caller import Caller


class UpdateSessionUseCase:
    """Move a session's time window; capacity is left as it is."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        session_id: int,
        lab_id: int,
        start_at: datetime,
        end_at: datetime,
        caller: Caller,
    ) -> LabSession:
        async with self.uow:
            lab = await self.uow.lab_repo.get_for_update(lab_id=lab_id)
            if not lab:
                raise NotFoundError('Lab not found')

            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session or session.lab_id != lab_id:
                raise NotFoundError('Session not found')
            caller.ensure_owner_or_admin(session.created_by_id, 'update this session')

            rescheduled = session.reschedule(start_at=start_at, end_at=end_at)
            if await self.uow.session_repo.find_overlapping(
                lab_id=lab_id,
                start_at=rescheduled.start_at,
                end_at=rescheduled.end_at,
                exclude_id=session_id,
            ):
                raise SessionOverlapError()

            updated = await self.uow.session_repo.update_window(
                session_id=session_id, start_at=rescheduled.start_at, end_at=rescheduled.end_at
            )
            await self.uow.commit()

        Logger.base.info(f'📅 [SESSION] Rescheduled session {session_id}')
        return updated
