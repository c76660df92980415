from typing import List, Self, Sequence

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller


@attrs.frozen
class RoleChange:
    user_id: str
    role: UserRole


class UpdateRolesUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, changes: Sequence[RoleChange], caller: Caller) -> List[LabUser]:
        caller.ensure_admin('change roles')

        async with self.uow:
            users = await self.uow.user_repo.get_many(
                user_ids=[change.user_id for change in changes]
            )
            saved = []
            for change in changes:
                user = users.get(change.user_id)
                if not user:
                    raise NotFoundError(f'User {change.user_id} not found')
                saved.append(
                    await self.uow.user_repo.save(user=attrs.evolve(user, role=change.role))
                )
            await self.uow.commit()

        Logger.base.info(f'👥 [ROLES] {len(saved)} roles updated by {caller.user_id}')
        return saved
