"""
User Query Use Cases (Use Case Layer)
"""

from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller


class UserQueryUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_user(self, *, user_id: str) -> Optional[LabUser]:
        async with self.uow:
            return await self.uow.user_repo.get_by_id(user_id=user_id)

    @Logger.io
    async def get_me(self, *, caller: Caller) -> LabUser:
        user = await self.get_user(user_id=caller.user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    @Logger.io
    async def list_accounts(
        self, *, caller: Caller, role: Optional[UserRole] = None
    ) -> List[LabUser]:
        caller.ensure_staff('list accounts')
        async with self.uow:
            return await self.uow.user_repo.list_all(role=role)
