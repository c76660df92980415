from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


class CreateLabUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, name: str, layout: Optional[LabLayout], caller: Caller) -> Lab:
        caller.ensure_admin('create labs')
        lab = Lab.create(name=name, layout=layout)

        async with self.uow:
            created = await self.uow.lab_repo.create(lab=lab)
            for position in created.layout.positions():
                await self.uow.seat_repo.get_or_create(
                    lab_id=created.id or 0, name=position.name, row=position.row, col=position.col
                )
            await self.uow.commit()

        Logger.base.info(
            f'🧪 [LAB] Created lab {created.name} ({created.layout.total_seats} seats)'
        )
        return created
