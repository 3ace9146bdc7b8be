from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

ASYNC_DRIVER = "postgresql+asyncpg"
SYNC_DRIVER = "postgresql"


class Settings(BaseSettings):
    """
    Connection settings for the console's Postgres store.

    Either a full URL (POSTGRES_URL, or DATABASE_URL as hosting platforms name it)
    or the individual POSTGRES_* parts. `postgres://` URLs are accepted.
    """

    POSTGRES_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("POSTGRES_URL", "DATABASE_URL"),
        description="Full connection URL; takes precedence over the parts below.",
    )
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432

    SQL_ECHO: bool = Field(default=False, description="Log every SQL statement")
    DB_POOL_SIZE: int = Field(
        default=5,
        ge=1,
        description="Connection pool size. A dashboard load holds up to four connections at once.",
    )
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def _url(self) -> URL:
        if self.POSTGRES_URL:
            url = make_url(self.POSTGRES_URL)
            if url.drivername == "postgres":
                url = url.set(drivername=SYNC_DRIVER)
            return url
        if not (self.POSTGRES_USER and self.POSTGRES_PASSWORD and self.POSTGRES_DB):
            raise ValueError(
                "Database configuration missing: set POSTGRES_URL, or POSTGRES_USER, "
                "POSTGRES_PASSWORD and POSTGRES_DB."
            )
        return URL.create(
            SYNC_DRIVER,
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )

    @property
    def async_database_url(self) -> str:
        """URL for the AsyncEngine, always on the asyncpg driver."""
        return self._url().set(drivername=ASYNC_DRIVER).render_as_string(hide_password=False)

    @property
    def sync_database_url(self) -> str:
        """Driver-less URL, used by Alembic in offline mode."""
        return self._url().set(drivername=SYNC_DRIVER).render_as_string(hide_password=False)


# PUBLIC_INTERFACE
@lru_cache
def get_settings() -> Settings:
    """Return the process-wide database Settings."""
    return Settings()
