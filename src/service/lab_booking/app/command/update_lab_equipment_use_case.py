from datetime import datetime
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import ExceedsInventoryError
from src.service.lab_booking.domain.entity.equipment_entity import Equipment
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.domain.value_object.caller import Caller


class UpdateLabEquipmentUseCase:
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
        equipment_id: int,
        name: str,
        total: int,
        caller: Caller,
        unit_type: UnitType = UnitType.UNIT,
        expiration_date: Optional[datetime] = None,
    ) -> Equipment:
        """
        Raises:
            ExceedsInventoryError: a session already offers more than the new total
        """
        caller.ensure_staff('manage lab equipment')

        async with self.uow:
            current = await self.uow.equipment_repo.get_by_id(equipment_id=equipment_id)
            if not current:
                raise NotFoundError('Equipment not found')

            validated = Equipment.create(
                lab_id=current.lab_id,
                name=name,
                total=total,
                unit_type=unit_type,
                expiration_date=expiration_date,
            )
            offers = await self.uow.equipment_repo.list_offers_by_equipment(
                equipment_id=equipment_id
            )
            offered = max((offer.available for offer in offers), default=0)
            if offered > validated.total:
                raise ExceedsInventoryError(
                    f'A session offers {offered} {validated.name}, '
                    f'total cannot drop to {validated.total}'
                )

            updated = await self.uow.equipment_repo.update(
                equipment=attrs.evolve(
                    current,
                    name=validated.name,
                    total=validated.total,
                    unit_type=validated.unit_type,
                    expiration_date=validated.expiration_date,
                )
            )
            await self.uow.commit()

        return updated
