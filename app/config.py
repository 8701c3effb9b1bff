"""Application configuration."""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Security
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

APP_VERSION = "1.0.0"
MODES = ("debug", "release")


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


class Settings(BaseSettings):
    """Process-wide settings, read from the environment once at startup.

    Field names map to upper-case environment variables (``DB_HOST``,
    ``SERVER_PORT``, ...). Empty variables count as unset.
    """

    model_config = {
        "frozen": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_ignore_empty": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    db_host: str = "localhost"
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "birthday_db"
    database_url: Optional[str] = None
    server_port: int = Field(default=8080, ge=1, le=65535)
    mode: str = Field(default="debug", validation_alias="APP_MODE")
    api_key: str = "default-api-key"
    jwt_secret: str = "default-jwt-secret"
    jwt_algorithm: str = ALGORITHM
    access_token_expire_minutes: int = Field(default=ACCESS_TOKEN_EXPIRE_MINUTES, ge=1)

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        mode = v.lower()
        if mode not in MODES:
            raise ValueError(f"Invalid mode '{v}'. Must be one of: {', '.join(MODES)}")
        return mode

    @property
    def is_release(self) -> bool:
        return self.mode == "release"

    @property
    def token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    def sqlalchemy_url(self):
        """Return DATABASE_URL when set, otherwise a Postgres URL built from DB_*."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


def load_settings() -> Settings:
    """Read settings from the environment, raising ConfigError on bad values."""
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (FastAPI dependency)."""
    return load_settings()
