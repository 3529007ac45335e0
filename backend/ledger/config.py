"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Credentials come from environment variables or .env, never from code
    - get_settings() is cached (lru_cache): one Settings per process
    - database_url is always an async driver URL after validation

Design Decisions:
    - Two ways to point at PostgreSQL: a full DATABASE_URL, or the
      DATABASE_HOST / _NAME / _USERNAME / _PASSWORD / _SSL_MODE parts that
      container platforms usually inject. Parts win when DATABASE_HOST is set
    - service_name doubles as the PostgreSQL application_name, so the
      connections show up by service in pg_stat_activity
    - database_ssl_root_cert is a CA bundle path; it becomes an SSLContext on
      the asyncpg connection (asyncpg takes no sslrootcert keyword)
"""

from functools import lru_cache
from urllib.parse import quote

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ledger settings read from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    service_name: str = "ledger-api"

    # Database
    database_url: str = "postgresql+asyncpg://ledger:ledger@db:5432/ledger"
    database_host: str | None = None
    database_name: str = "ledger"
    database_username: str = "ledger"
    database_password: str = ""
    database_ssl_mode: str | None = None
    database_ssl_root_cert: str | None = None
    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_migration_table: str = "alembic_version"
    # Alembic revision that must be applied before the API starts serving
    database_min_version: str | None = None

    # Requests; None disables the per-request deadline
    request_timeout_seconds: float | None = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @model_validator(mode="after")
    def compose_database_url(self) -> "Settings":
        if self.database_host:
            url = (
                f"postgresql+asyncpg://{quote(self.database_username, safe='')}"
                f":{quote(self.database_password, safe='')}"
                f"@{self.database_host}/{self.database_name}"
            )
            if self.database_ssl_mode:
                url += f"?ssl={self.database_ssl_mode}"
            self.database_url = url
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
