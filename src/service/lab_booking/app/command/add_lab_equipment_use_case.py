from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.equipment_entity import Equipment
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.domain.value_object.caller import Caller


class AddLabEquipmentUseCase:
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
        lab_id: int,
        name: str,
        total: int,
        caller: Caller,
        unit_type: UnitType = UnitType.UNIT,
        expiration_date: Optional[datetime] = None,
    ) -> Equipment:
        caller.ensure_staff('manage lab equipment')
        equipment = Equipment.create(
            lab_id=lab_id,
            name=name,
            total=total,
            unit_type=unit_type,
            expiration_date=expiration_date,
            created_by=caller.user_id,
        )

        async with self.uow:
            if not await self.uow.lab_repo.get_by_id(lab_id=lab_id):
                raise NotFoundError('Lab not found')
            created = await self.uow.equipment_repo.create(equipment=equipment)
            await self.uow.commit()

        Logger.base.info(f'🧰 [EQUIPMENT] Lab {lab_id} now owns {total} {created.name}')
        return created
