from pathlib import Path
from typing import List, Literal, Optional

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

    PROJECT_NAME: str = 'Box Office'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Persistent store: 'postgres' (SQLAlchemy + asyncpg) or 'memory' (single process)
    STORE_BACKEND: Literal['postgres', 'memory'] = 'postgres'

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'box_office'

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # SQLAlchemy pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 3600  # seconds
    DB_POOL_PRE_PING: bool = True

    # Inventory ledger (optimistic compare-and-set retries)
    LEDGER_MAX_ATTEMPTS: int = 8
    LEDGER_BACKOFF_BASE_SECONDS: float = 0.005
    LEDGER_BACKOFF_MAX_SECONDS: float = 0.2

    # Booking policy
    MAX_TICKETS_PER_BOOKING: int = 10

    # Check-in policy
    CHECK_IN_REJECT_AFTER_EVENT_END: bool = False
    CHECK_IN_GRACE_MINUTES: int = 0

    # Logging (file sink only in DEBUG)
    LOG_DIR: Path = _PROJECT_ROOT / 'logs'

    # Event archiving
    ARCHIVE_BUFFER_HOURS: int = 24

    # Tracing export (empty endpoint exports nothing)
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
