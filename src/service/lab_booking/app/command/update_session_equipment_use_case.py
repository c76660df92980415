from typing import List, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.dto.equipment_dto import EquipmentOffer
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.domain.entity.equipment_entity import SessionEquipment
from src.service.lab_booking.domain.value_object.caller import Caller


class UpdateSessionEquipmentUseCase:
    def __init__(
        self, *, uow: AbstractUnitOfWork, equipment_ledger: EquipmentReservationLedger
    ) -> None:
        self.uow = uow
        self.equipment_ledger = equipment_ledger

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        equipment_ledger: EquipmentReservationLedger = Depends(
            Provide[Container.equipment_ledger]
        ),
    ) -> Self:
        return cls(uow=uow, equipment_ledger=equipment_ledger)

    @Logger.io
    async def execute(
        self,
        *,
        session_id: int,
        caller: Caller,
        deletions: Sequence[int] = (),
        additions: Sequence[EquipmentOffer] = (),
        updates: Sequence[EquipmentOffer] = (),
    ) -> List[SessionEquipment]:
        caller.ensure_staff('change session equipment')

        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session:
                raise NotFoundError('Session not found')

            offers = await self.equipment_ledger.update_session_equipment(
                uow=self.uow,
                session_id=session_id,
                lab_id=session.lab_id,
                deletions=deletions,
                additions=additions,
                updates=updates,
            )
            await self.uow.commit()

        Logger.base.info(
            f'🧰 [EQUIPMENT] Session {session_id}: -{len(deletions)} +{len(additions)} '
            f'~{len(updates)} offers'
        )
        return offers
