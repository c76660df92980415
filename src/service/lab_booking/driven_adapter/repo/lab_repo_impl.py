from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_lab_repo import ILabRepo
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.driven_adapter.model.lab_model import LabModel


class LabRepoImpl(ILabRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: LabModel) -> Lab:
        return Lab(
            id=model.id,
            name=model.name,
            row_config=model.row_config,
            created_at=as_utc(model.created_at) if model.created_at else None,
        )

    @Logger.io
    async def get_by_id(self, *, lab_id: int) -> Optional[Lab]:
        model = await self.session.get(LabModel, lab_id)
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_update(self, *, lab_id: int) -> Optional[Lab]:
        result = await self.session.execute(
            select(LabModel)
            .where(LabModel.id == lab_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_share(self, *, lab_id: int) -> Optional[Lab]:
        result = await self.session.execute(
            select(LabModel)
            .where(LabModel.id == lab_id)
            .with_for_update(read=True)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def find_by_name(self, *, name: str) -> Optional[Lab]:
        result = await self.session.execute(
            select(LabModel)
            .where(LabModel.name.ilike(f'%{name.strip()}%'))
            .order_by(LabModel.id)
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def create(self, *, lab: Lab) -> Lab:
        model = LabModel(name=lab.name, row_config=lab.row_config)
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Lab "{lab.name}" already exists') from e
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def update_row_config(self, *, lab_id: int, row_config: str) -> Lab:
        model = await self.session.get(LabModel, lab_id)
        if model is None:
            raise NotFoundError('Lab not found')
        model.row_config = row_config
        await self.session.flush()
        return self._to_entity(model)
