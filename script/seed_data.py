#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data into the database

Features:
1. Create Users - one admin, one teacher and two students
2. Create Lab - the Physics lab with the default A/B/C x 6 + Edge layout
3. Create Session - a two-hour session tomorrow, owned by the teacher
4. Create Equipment - two items offered to that session

Each user's bearer token is printed for manual API calls.
"""

import asyncio
from datetime import timedelta

from src.platform.config.di import container
from src.service.lab_booking.app.command.add_lab_equipment_use_case import (
    AddLabEquipmentUseCase,
)
from src.service.lab_booking.app.command.create_lab_use_case import CreateLabUseCase
from src.service.lab_booking.app.command.create_session_use_case import CreateSessionUseCase
from src.service.lab_booking.app.command.update_session_equipment_use_case import (
    UpdateSessionEquipmentUseCase,
)
from src.service.lab_booking.app.dto.equipment_dto import EquipmentOffer
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


SEED_USERS = [
    LabUser(id='seed_admin', email='admin@lab.local', first_name='Ada', last_name='Admin', role=UserRole.ADMIN),
    LabUser(id='seed_teacher', email='teacher@lab.local', first_name='Tomas', last_name='Teacher', role=UserRole.TEACHER),
    LabUser(id='seed_student_1', email='s1@lab.local', first_name='Sara', last_name='Student', role=UserRole.STUDENT),
    LabUser(id='seed_student_2', email='s2@lab.local', first_name='Sam', last_name='Student', role=UserRole.STUDENT),
]


def _caller(user: LabUser) -> Caller:
    return Caller(user_id=user.id, role=user.role)


async def create_users() -> None:
    print(f'👥 Creating {len(SEED_USERS)} users...')
    uow = container.unit_of_work()
    async with uow:
        for user in SEED_USERS:
            await uow.user_repo.save(user=user)
            print(f'   ✅ {user.role.value}: {user.id} <{user.email}>')
        await uow.commit()


async def create_lab_session_and_equipment() -> None:
    admin, teacher = _caller(SEED_USERS[0]), _caller(SEED_USERS[1])

    lab = await CreateLabUseCase(uow=container.unit_of_work()).execute(
        name='Physics', layout=LabLayout.default(), caller=admin
    )
    print(f'🧪 Created lab: ID={lab.id}, Name={lab.name}, Seats={lab.layout.total_seats}')

    start_at = (utc_now() + timedelta(days=1)).replace(hour=9, minute=0, second=0, microsecond=0)
    session = await CreateSessionUseCase(uow=container.unit_of_work()).execute(
        lab_id=lab.id, start_at=start_at, end_at=start_at + timedelta(hours=2), caller=teacher
    )
    print(f'📅 Created session: ID={session.id}, {session.start_at:%Y-%m-%d %H:%M} UTC')

    add_equipment = AddLabEquipmentUseCase(uow=container.unit_of_work())
    microscope = await add_equipment.execute(
        lab_id=lab.id, name='Microscope', total=5, unit_type=UnitType.UNIT, caller=teacher
    )
    ethanol = await add_equipment.execute(
        lab_id=lab.id, name='Ethanol', total=500, unit_type=UnitType.ML, caller=teacher
    )
    await UpdateSessionEquipmentUseCase(
        uow=container.unit_of_work(), equipment_ledger=container.equipment_ledger()
    ).execute(
        session_id=session.id,
        caller=teacher,
        additions=[
            EquipmentOffer(equipment_id=microscope.id, available=3),
            EquipmentOffer(equipment_id=ethanol.id, available=200),
        ],
    )
    print('🧰 Offered Microscope x3 and Ethanol 200 ML')


async def main() -> None:
    print('🌱 Starting data seeding...')
    print('=' * 50)

    try:
        await create_users()
        await create_lab_session_and_equipment()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print('📋 Bearer tokens:')
        jwt_auth = container.jwt_auth()
        for user in SEED_USERS:
            token = jwt_auth.create_jwt_token(user_id=user.id, role=user.role, email=user.email)
            print(f'   {user.role.value}: {token}')
    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        raise SystemExit(1)


if __name__ == '__main__':
    asyncio.run(main())
