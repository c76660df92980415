from typing import Dict, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.dto.booking_view_dto import BookingView
from src.service.lab_booking.app.service.booking_notice_builder import equipment_lines
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class BookingQueryUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    async def _views(self, bookings: List[SeatBooking]) -> List[BookingView]:
        sessions: Dict[int, LabSession] = {}
        labs: Dict[int, Lab] = {}
        for booking in bookings:
            if booking.session_id not in sessions:
                session = await self.uow.session_repo.get_by_id(session_id=booking.session_id)
                if session:
                    sessions[booking.session_id] = session
                    if session.lab_id not in labs:
                        lab = await self.uow.lab_repo.get_by_id(lab_id=session.lab_id)
                        if lab:
                            labs[session.lab_id] = lab

        users = await self.uow.user_repo.get_many(user_ids=[b.user_id for b in bookings])
        reserved = await self.uow.equipment_repo.list_bookings_by_seat_bookings(
            seat_booking_ids=[b.id for b in bookings if b.id is not None]
        )

        views = []
        for booking in bookings:
            session = sessions.get(booking.session_id)
            if session is None:
                continue
            lab = labs.get(session.lab_id)
            user = users.get(booking.user_id)
            views.append(
                BookingView(
                    booking_id=booking.id or 0,
                    session_id=booking.session_id,
                    lab_id=session.lab_id,
                    lab_name=lab.name if lab else '',
                    seat_name=booking.name,
                    user_id=booking.user_id,
                    user_name=user.display_name if user else booking.user_id,
                    status=booking.status,
                    start_at=session.start_at,
                    end_at=session.end_at,
                    notes=booking.notes,
                    equipment=await equipment_lines(
                        self.uow, [item for item in reserved if item.seat_booking_id == booking.id]
                    ),
                )
            )
        return views

    @Logger.io
    async def list_my_bookings(self, *, caller: Caller) -> List[BookingView]:
        async with self.uow:
            bookings = await self.uow.seat_booking_repo.list_by_user(user_id=caller.user_id)
            return await self._views(bookings)

    @Logger.io
    async def list_pending(self, *, caller: Caller) -> List[BookingView]:
        caller.ensure_staff('review pending bookings')
        async with self.uow:
            bookings = await self.uow.seat_booking_repo.list_pending()
            return await self._views(bookings)
