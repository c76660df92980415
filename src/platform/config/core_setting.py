from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Lab Seat Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_COOKIE_NAME: str = 'lab_session'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'lab_booking'

    # Full URL override (e.g. sqlite+aiosqlite:///./lab.db for local runs)
    DATABASE_URL: Optional[str] = None

    # Connection pool (ignored by SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Booking rules
    LOCKOUT_MINUTES: int = 15
    MIN_SESSION_MINUTES: int = 5

    # Outbound e-mail (sending is skipped when SMTP_HOST is empty)
    SMTP_HOST: str = ''
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ''
    SMTP_PASSWORD: SecretStr = SecretStr('')
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = 'Lab Reservations <no-reply@lab-booking.local>'
    TIMEZONE: str = 'Europe/Madrid'

    # Reminder scan
    CRON_SECRET: SecretStr = SecretStr('')
    STUDENT_REMINDER_LEAD_MINUTES: int = 180
    TEACHER_REMINDER_LEAD_MINUTES: int = 15
    REMINDER_TOLERANCE_MINUTES: int = 5

    # Tracing (nothing is exported unless one of these is set)
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
