from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.value_object.caller import Caller


class SyncAccountUseCase:
    """
    Mirror the caller's identity-provider profile into ``lab_user``.

    New accounts take the role from the token; existing accounts keep the
    stored role and ban state, which only staff change.
    """

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
        caller: Caller,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> LabUser:
        async with self.uow:
            existing = await self.uow.user_repo.get_by_id(user_id=caller.user_id)
            if existing:
                user = attrs.evolve(
                    existing, email=email, first_name=first_name, last_name=last_name
                )
            else:
                user = LabUser(
                    id=caller.user_id,
                    email=email,
                    first_name=first_name,
                    last_name=last_name,
                    role=caller.role,
                )
            saved = await self.uow.user_repo.save(user=user)
            await self.uow.commit()
        return saved
