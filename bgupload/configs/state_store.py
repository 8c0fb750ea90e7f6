"""
Job state store configuration.

Selects the JobStateStore backend and its SQLAlchemy connection settings.

Dependencies: pydantic, pydantic_settings
System role: Durable job state configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from bgupload.configs.base import BaseSettings


class StateStoreSettings(BaseSettings):
    """Job state persistence configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BGUPLOAD_STATE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(
        default="sql",
        description="State store backend: 'sql' (durable) or 'memory' (previews, tests)",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./bgupload_state.db",
        description="SQLAlchemy async URL, e.g. postgresql+asyncpg://user:pw@host/db",
    )
    pool_size: int = Field(default=5, description="Connection pool size (server databases only)")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")
