"""
Integration fixtures: real use cases wired from the container against the
per-worker SQLite database. Every data fixture depends on ``clean_database``
so the schema is reset before anything is seeded.
"""

from datetime import timedelta

import pytest

from src.platform.config.di import container
from src.service.lab_booking.app.command.create_lab_use_case import CreateLabUseCase
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout
from test.service.lab_booking.integration.helpers import USERS, create_session


@pytest.fixture
async def lab_users(clean_database) -> list[LabUser]:
    uow = container.unit_of_work()
    async with uow:
        for user in USERS:
            await uow.user_repo.save(user=user)
        await uow.commit()
    return USERS


@pytest.fixture
async def physics_lab(lab_users, admin) -> Lab:
    return await CreateLabUseCase(uow=container.unit_of_work()).execute(
        name='Physics', layout=LabLayout.default(), caller=admin
    )


@pytest.fixture
async def upcoming_session(physics_lab, teacher) -> LabSession:
    return await create_session(lab_id=physics_lab.id, caller=teacher, starts_in=timedelta(days=1))
