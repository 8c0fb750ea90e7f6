"""
Upload transport configuration.

Dependencies: pydantic, pydantic_settings
System role: HTTP upload endpoint configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from bgupload.configs.base import BaseSettings


class TransportSettings(BaseSettings):
    """HTTP upload transport configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BGUPLOAD_TRANSPORT_",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint_url: str = Field(
        default="https://example.com/upload",
        description="Destination URL receiving one POST per resource",
    )
    timeout_seconds: float = Field(default=120.0, description="Per-request timeout in seconds")
    supported_kinds: list[str] = Field(
        default_factory=list,
        description="Resource kinds the endpoint accepts (empty accepts all)",
    )
