#!/usr/bin/env python3
"""
Database Reset Script
Reset the booking database structure

Features:
1. Drop & Recreate Database - PostgreSQL database dropped and created again,
   or the SQLite file removed when DATABASE_URL points at one
2. Run Alembic Migrations - create the latest schema

Notes:
- This script only resets database structure, does not seed test data
- To seed test data, run `python script/seed_data.py`
"""

import asyncio
import os
from pathlib import Path
import subprocess

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url

from src.platform.config.core_setting import settings
from src.platform.constant.path import BASE_DIR


def _get_sync_url(async_url: str) -> str:
    """Convert async database URL to sync URL"""
    if async_url.startswith('postgresql+asyncpg://'):
        return async_url.replace('postgresql+asyncpg://', 'postgresql://')
    return async_url


def _drop_and_create_postgres(database_url: str) -> None:
    url = make_url(_get_sync_url(database_url))
    db_name = url.database
    admin_engine = create_engine(url.set(database='postgres'), isolation_level='AUTOCOMMIT')

    try:
        with admin_engine.connect() as conn:
            conn.execute(
                text(
                    'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
                    'WHERE datname = :name AND pid <> pg_backend_pid()'
                ),
                {'name': db_name},
            )
            conn.execute(text(f'DROP DATABASE IF EXISTS "{db_name}"'))
            print(f"   ✅ Database '{db_name}' dropped")
            conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"   ✅ Database '{db_name}' created")
    finally:
        admin_engine.dispose()


def _remove_sqlite_file(database_url: str) -> None:
    path = make_url(database_url).database
    if path and path != ':memory:' and Path(path).exists():
        os.remove(path)
        print(f"   ✅ SQLite file '{path}' removed")


def _run_alembic_migrations() -> None:
    print("   🔄 Running 'alembic upgrade head'...")
    result = subprocess.run(
        ['alembic', 'upgrade', 'head'], cwd=BASE_DIR, capture_output=True, text=True
    )
    if result.returncode != 0:
        print(f'   ❌ Migration failed (return code: {result.returncode})')
        if result.stderr:
            print(f'   📋 STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')
    print('   ✅ Database migrations completed')


async def drop_and_recreate_database() -> None:
    database_url = settings.DATABASE_URL_ASYNC
    print(f'Database URL: {make_url(database_url).render_as_string(hide_password=True)}')

    print('🗑️ Dropping database...')
    if database_url.startswith('sqlite'):
        _remove_sqlite_file(database_url)
    else:
        _drop_and_create_postgres(database_url)

    print('🏗️ Running database migrations...')
    _run_alembic_migrations()


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        await drop_and_recreate_database()
        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed test data, run: python script/seed_data.py')
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1)


if __name__ == '__main__':
    asyncio.run(main())
