from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_lab_user_repo import ILabUserRepo
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.driven_adapter.model.lab_user_model import LabUserModel


class LabUserRepoImpl(ILabUserRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: LabUserModel) -> LabUser:
        return LabUser(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            role=UserRole(model.role),
            is_banned=model.is_banned,
            banned_at=as_utc(model.banned_at) if model.banned_at else None,
            banned_by=model.banned_by,
            ban_reason=model.ban_reason,
        )

    @Logger.io
    async def get_by_id(self, *, user_id: str) -> Optional[LabUser]:
        model = await self.session.get(LabUserModel, user_id)
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_many(self, *, user_ids: List[str]) -> Dict[str, LabUser]:
        if not user_ids:
            return {}
        result = await self.session.execute(
            select(LabUserModel).where(LabUserModel.id.in_(set(user_ids)))
        )
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    @Logger.io
    async def list_all(self, *, role: Optional[UserRole] = None) -> List[LabUser]:
        stmt = select(LabUserModel)
        if role is not None:
            stmt = stmt.where(LabUserModel.role == role.value)
        result = await self.session.execute(
            stmt.order_by(LabUserModel.last_name, LabUserModel.first_name, LabUserModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def save(self, *, user: LabUser) -> LabUser:
        model = await self.session.get(LabUserModel, user.id)
        if model is None:
            model = LabUserModel(id=user.id)
            self.session.add(model)
        model.email = user.email
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.role = user.role.value
        model.is_banned = user.is_banned
        model.banned_at = user.banned_at
        model.banned_by = user.banned_by
        model.ban_reason = user.ban_reason
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def delete(self, *, user_id: str) -> None:
        await self.session.execute(
            delete(LabUserModel)
            .where(LabUserModel.id == user_id)
            .execution_options(synchronize_session=False)
        )
