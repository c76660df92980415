from datetime import datetime, timedelta
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.dto.booking_view_dto import OccupiedSeat, SessionEquipmentView
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession


DAY = timedelta(hours=24)


class SessionQueryUseCase:
    """Read side of the session lifecycle."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_session(self, *, session_id: int) -> LabSession:
        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
        if not session:
            raise NotFoundError('Session not found')
        return session

    @Logger.io
    async def list_sessions(self, *, lab_id: int, day_start: datetime) -> List[LabSession]:
        """Sessions of one lab starting in [day_start, day_start + 24h)"""
        async with self.uow:
            return await self.uow.session_repo.list_starting_between(
                start=day_start, end=day_start + DAY, lab_id=lab_id
            )

    @Logger.io
    async def list_all_sessions(self, *, day_start: datetime) -> List[LabSession]:
        async with self.uow:
            return await self.uow.session_repo.list_starting_between(
                start=day_start, end=day_start + DAY
            )

    @Logger.io
    async def list_occupied_seats(self, *, lab_id: int, session_id: int) -> List[OccupiedSeat]:
        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session or session.lab_id != lab_id:
                raise NotFoundError('Session not found')
            bookings = await self.uow.seat_booking_repo.list_by_session(session_id=session_id)
            users = await self.uow.user_repo.get_many(
                user_ids=[booking.user_id for booking in bookings]
            )

        return [
            OccupiedSeat(
                booking_id=booking.id or 0,
                seat_name=booking.name,
                user_id=booking.user_id,
                user_name=(
                    users[booking.user_id].display_name
                    if booking.user_id in users
                    else booking.user_id
                ),
                status=booking.status,
            )
            for booking in bookings
        ]

    @Logger.io
    async def get_session_equipment(self, *, session_id: int) -> List[SessionEquipmentView]:
        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session:
                raise NotFoundError('Session not found')
            offers = await self.uow.equipment_repo.list_offers_by_session(session_id=session_id)
            inventory = {
                equipment.id: equipment
                for equipment in await self.uow.equipment_repo.list_by_lab(lab_id=session.lab_id)
            }

        views = []
        for offer in offers:
            equipment = inventory.get(offer.equipment_id)
            if equipment is None:
                continue
            views.append(
                SessionEquipmentView(
                    equipment_id=offer.equipment_id,
                    name=equipment.name,
                    unit_type=equipment.unit_type,
                    total=equipment.total,
                    available=offer.available,
                    reserved=offer.reserved,
                )
            )
        return views
