from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.equipment_entity import Equipment
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.seat_entity import Seat
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


class LabQueryUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_lab(self, *, lab_id: int) -> Lab:
        async with self.uow:
            lab = await self.uow.lab_repo.get_by_id(lab_id=lab_id)
        if not lab:
            raise NotFoundError('Lab not found')
        return lab

    @Logger.io
    async def get_layout(self, *, lab_id: int) -> LabLayout:
        lab = await self.get_lab(lab_id=lab_id)
        return lab.layout

    @Logger.io
    async def find_by_name(self, *, name: str) -> Lab:
        async with self.uow:
            lab = await self.uow.lab_repo.find_by_name(name=name)
        if not lab:
            raise NotFoundError('Lab not found')
        return lab

    @Logger.io
    async def list_seats(self, *, lab_id: int) -> List[Seat]:
        async with self.uow:
            if not await self.uow.lab_repo.get_by_id(lab_id=lab_id):
                raise NotFoundError('Lab not found')
            return await self.uow.seat_repo.list_by_lab(lab_id=lab_id)

    @Logger.io
    async def list_equipment(self, *, lab_id: int) -> List[Equipment]:
        async with self.uow:
            return await self.uow.equipment_repo.list_by_lab(lab_id=lab_id)
