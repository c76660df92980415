from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.service.seat_identity_resolver import SeatIdentityResolver
from src.service.lab_booking.domain.booking_errors import SeatTakenError
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class SwitchSeatUseCase:
    """Move the caller's booking to another seat of the same session."""

    def __init__(
        self, *, uow: AbstractUnitOfWork, seat_identity_resolver: SeatIdentityResolver
    ) -> None:
        self.uow = uow
        self.seat_identity_resolver = seat_identity_resolver
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        seat_identity_resolver: SeatIdentityResolver = Depends(
            Provide[Container.seat_identity_resolver]
        ),
    ) -> Self:
        return cls(uow=uow, seat_identity_resolver=seat_identity_resolver)

    @Logger.io
    async def execute(
        self, *, session_id: int, lab_id: int, new_seat_name: str, caller: Caller
    ) -> SeatBooking:
        with (
            metrics.track_booking('switch'),
            self.tracer.start_as_current_span(
                'use_case.switch_seat',
                attributes={'session.id': session_id, 'seat.name': new_seat_name},
            ),
        ):
            async with self.uow:
                lab = await self.uow.lab_repo.get_for_share(lab_id=lab_id)
                if not lab:
                    raise NotFoundError('Lab not found')
                session = await self.uow.session_repo.get_by_id(session_id=session_id)
                if not session or session.lab_id != lab_id:
                    raise NotFoundError('Session not found')
                if not caller.is_staff:
                    session.ensure_open(utc_now())

                position = self.seat_identity_resolver.locate(lab=lab, seat_name=new_seat_name)

                current = await self.uow.seat_booking_repo.find_by_session_and_user(
                    session_id=session_id, user_id=caller.user_id
                )
                if not current:
                    raise NotFoundError('You have no booking in this session')
                if current.name == position.name:
                    return current

                seat = await self.seat_identity_resolver.resolve(
                    uow=self.uow, lab=lab, seat_name=position.name
                )
                if await self.uow.seat_booking_repo.find_by_session_and_seat(
                    session_id=session_id, seat_id=seat.id or 0
                ):
                    raise SeatTakenError(seat.name)

                moved = await self.uow.seat_booking_repo.move_to_seat(
                    booking_id=current.id or 0, seat_id=seat.id or 0, name=seat.name
                )
                await self.uow.commit()

        Logger.base.info(
            f'🔀 [SWITCH] {caller.user_id} moved {current.name} -> {moved.name} '
            f'in session {session_id}'
        )
        return moved
