"""
Resource provider configuration.

Chooses where asset resources are read from: a local directory tree or an
S3 bucket. Both use the layout <root>/<asset>/<kind>/<filename>.

Dependencies: pydantic, pydantic_settings
System role: Asset store configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from bgupload.configs.base import BaseSettings


class ResourceSettings(BaseSettings):
    """Asset resource source configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BGUPLOAD_RESOURCES_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(
        default="filesystem",
        description="Resource backend: 'filesystem' or 's3'",
    )
    root_directory: str = Field(
        default="./assets",
        description="Root directory of the local asset library",
    )
    bucket: str = Field(default="", description="S3 bucket holding asset resources")
    key_prefix: str = Field(default="assets/", description="S3 key prefix for assets")
    region: str = Field(default="ap-southeast-2", description="AWS region for the bucket")
