import pytest

from src.platform.config.core_setting import Settings


@pytest.mark.unit
class TestSettings:
    def test_cors_origins_from_comma_list(self):
        settings = Settings(
            _env_file=None, BACKEND_CORS_ORIGINS='http://localhost:3000, https://lab.example.edu'
        )

        assert settings.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://lab.example.edu',
        ]

    def test_database_url_built_from_postgres_parts(self):
        settings = Settings(
            _env_file=None,
            DATABASE_URL=None,
            POSTGRES_USER='lab',
            POSTGRES_PASSWORD='pw',
            POSTGRES_SERVER='db',
            POSTGRES_PORT=5433,
            POSTGRES_DB='labs',
        )

        assert settings.DATABASE_URL_ASYNC == 'postgresql+asyncpg://lab:pw@db:5433/labs'

    def test_explicit_database_url_wins(self):
        settings = Settings(_env_file=None, DATABASE_URL='sqlite+aiosqlite:///./lab.db')

        assert settings.DATABASE_URL_ASYNC == 'sqlite+aiosqlite:///./lab.db'

    def test_booking_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.LOCKOUT_MINUTES == 15
        assert settings.MIN_SESSION_MINUTES == 5
        assert settings.TIMEZONE == 'Europe/Madrid'
