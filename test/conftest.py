"""
Test Configuration and Fixtures

This module provides:
- A per-worker SQLite database (aiosqlite) selected before any app import
- ``clean_database``: drop and recreate every table around integration tests
- Caller/token helpers shared by unit and integration tests

Architecture:
- Unit tests (test/**/unit/): marked ``unit``, no database, AsyncMock repositories
- Integration tests: marked ``integration``, real repositories and Unit of Work
- BDD scenarios: own TestClient whose lifespan resets the schema
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# settings are read at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    suffix = '' if worker_id == 'master' else f'_{worker_id}'
    db_path = test_log_dir / f'lab_booking_test{suffix}.db'
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_path}'

    # e-mails are kept in memory by the logging sender
    os.environ['SMTP_HOST'] = ''
    os.environ['SECRET_KEY'] = 'test_secret_key_for_the_lab_booking_suite'


_early_setup_test_environment()

from collections import deque  # noqa: E402
from collections.abc import AsyncGenerator, Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from src.platform.database.orm_db_setting import Base, dispose_engine, get_engine  # noqa: E402
import src.service.lab_booking.driven_adapter.model  # noqa: E402, F401
from src.service.lab_booking.domain.enum.user_role import UserRole  # noqa: E402
from src.service.lab_booking.domain.value_object.caller import Caller  # noqa: E402


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'integration' in markers:
            item.fixturenames.append('clean_database')


# =============================================================================
# Database
# =============================================================================
async def reset_schema() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    await reset_schema()
    yield
    await dispose_engine()


@pytest.fixture
def sent_emails() -> deque[dict]:
    """In-memory outbox of the logging e-mail sender, emptied per test"""
    outbox = container.email_sender().sent_emails
    outbox.clear()
    return outbox


# =============================================================================
# Callers
# =============================================================================
@pytest.fixture
def admin() -> Caller:
    return Caller(user_id='admin_1', role=UserRole.ADMIN)


@pytest.fixture
def teacher() -> Caller:
    return Caller(user_id='teacher_1', role=UserRole.TEACHER)


@pytest.fixture
def student() -> Caller:
    return Caller(user_id='student_1', role=UserRole.STUDENT)


@pytest.fixture
def another_student() -> Caller:
    return Caller(user_id='student_2', role=UserRole.STUDENT)


@pytest.fixture
def banned_student() -> Caller:
    return Caller(user_id='student_banned', role=UserRole.STUDENT, is_banned=True)


# =============================================================================
# HTTP Client (BDD scenarios)
# =============================================================================
@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


# =============================================================================
# BDD Step Definitions
# =============================================================================
from test.bdd_steps_loader import *  # noqa: E402, F401, F403
