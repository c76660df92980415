from datetime import datetime
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import SessionOverlapError
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.value_object.caller import Caller


class CreateSessionUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, lab_id: int, start_at: datetime, end_at: datetime, caller: Caller
    ) -> LabSession:
        """
        Raises:
            ForbiddenError: caller is not staff
            NotFoundError: unknown lab
            InvalidSessionWindowError: end not after start or shorter than the minimum
            InvalidLabConfigError: the lab layout has no seats
            SessionOverlapError: another session of the lab touches the window
        """
        caller.ensure_staff('create sessions')

        with self.tracer.start_as_current_span(
            'use_case.create_session', attributes={'lab.id': lab_id}
        ):
            async with self.uow:
                # held until commit so concurrent creates on this lab serialize
                lab = await self.uow.lab_repo.get_for_update(lab_id=lab_id)
                if not lab:
                    raise NotFoundError('Lab not found')

                session = LabSession.create(
                    lab_id=lab_id,
                    start_at=start_at,
                    end_at=end_at,
                    total_seats=lab.layout.total_seats,
                    created_by_id=caller.user_id,
                )

                if await self.uow.session_repo.find_overlapping(
                    lab_id=lab_id, start_at=session.start_at, end_at=session.end_at
                ):
                    raise SessionOverlapError()

                created = await self.uow.session_repo.create(session=session)
                await self.uow.commit()

        Logger.base.info(
            f'📅 [SESSION] Created session {created.id} in lab {lab.name} '
            f'{created.start_at.isoformat()} - {created.end_at.isoformat()}'
        )
        return created
