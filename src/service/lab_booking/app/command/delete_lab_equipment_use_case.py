from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import ReservationsExistError
from src.service.lab_booking.domain.value_object.caller import Caller


class DeleteLabEquipmentUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, equipment_id: int, caller: Caller) -> None:
        caller.ensure_staff('manage lab equipment')

        async with self.uow:
            equipment = await self.uow.equipment_repo.get_by_id(equipment_id=equipment_id)
            if not equipment:
                raise NotFoundError('Equipment not found')

            offers = await self.uow.equipment_repo.list_offers_by_equipment(
                equipment_id=equipment_id
            )
            reserved = sum(offer.reserved for offer in offers)
            if reserved > 0:
                raise ReservationsExistError(
                    f'Cannot delete {equipment.name}: {reserved} still reserved in sessions'
                )

            await self.uow.equipment_repo.delete_offers_by_equipment(equipment_id=equipment_id)
            await self.uow.equipment_repo.delete(equipment_id=equipment_id)
            await self.uow.commit()

        Logger.base.info(f'🗑️ [EQUIPMENT] Deleted {equipment.name} from lab {equipment.lab_id}')
