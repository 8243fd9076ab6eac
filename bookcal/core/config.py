# bookcal/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
import urllib.parse

from bookcal.scheduling.models import CalendarSettings


class Settings(BaseSettings):
    # Read env from .env; ignore unknown keys so extra lines don't crash startup
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Database ---
    # Explicit URL wins; otherwise the POSTGRES_* parts are used when complete,
    # and a local SQLite file is the last resort.
    DATABASE_URL: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    SQLITE_PATH: str = "./bookcal.db"

    # --- Monitoring & Logging ---
    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = False
    LOG_RESPONSES: bool = False
    MAX_LOG_LENGTH: int = 200
    SLOW_REQUEST_THRESHOLD: float = 2.0

    # --- Tenancy / directory ---
    DEFAULT_TENANT_ID: str = "tenant-123"
    SEED_DIRECTORY: bool = True

    # --- Calendar grid ---
    LOCALE: str = "en"
    WEEK_START_DAY: int = 1  # 0=Sun, 1=Mon
    HOUR_HEIGHT_PX: int = 60
    MIN_APPOINTMENT_HEIGHT_PX: int = 15
    DAY_START_HOUR: int = 0
    DAY_END_HOUR: int = 24
    SLOT_INTERVAL_MINUTES: int = 60
    AGENDA_LABEL: str = "Agenda"

    # Async URI (SQLAlchemy engine)
    @property
    def async_db_uri(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_HOST and self.POSTGRES_DB and self.POSTGRES_USER:
            pwd = urllib.parse.quote_plus(self.POSTGRES_PASSWORD or "")
            return f"postgresql+asyncpg://{self.POSTGRES_USER}:{pwd}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    @property
    def calendar(self) -> CalendarSettings:
        """Snapshot of the grid/title knobs, passed explicitly into the engine."""
        return CalendarSettings(
            locale=self.LOCALE,
            week_start_day=self.WEEK_START_DAY,
            hour_height=self.HOUR_HEIGHT_PX,
            min_height=self.MIN_APPOINTMENT_HEIGHT_PX,
            day_start_hour=self.DAY_START_HOUR,
            day_end_hour=self.DAY_END_HOUR,
            slot_interval_minutes=self.SLOT_INTERVAL_MINUTES,
            agenda_label=self.AGENDA_LABEL,
        )

    # Monitoring helpers
    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in ("development", "dev", "local")

    @property
    def is_testing(self) -> bool:
        return self.APP_ENV.lower() in ("test", "testing")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() in ("production", "prod")


# Singleton
settings = Settings()
