from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.value_object.caller import Caller


class UpdateBanStatusUseCase:
    """
    Ban or unban a student.

    A banned student can still book, but the booking waits for staff approval.
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
        self, *, user_id: str, is_banned: bool, caller: Caller, reason: Optional[str] = None
    ) -> LabUser:
        caller.ensure_staff('change ban status')

        async with self.uow:
            user = await self.uow.user_repo.get_by_id(user_id=user_id)
            if not user:
                raise NotFoundError('User not found')

            changed = (
                user.ban(by=caller.user_id, reason=reason, at=utc_now())
                if is_banned
                else user.unban()
            )
            saved = await self.uow.user_repo.save(user=changed)
            await self.uow.commit()

        Logger.base.info(
            f'⛔ [BAN] {user_id} {"banned" if is_banned else "unbanned"} by {caller.user_id}'
        )
        return saved
