"""
Job queue configuration.

Dependencies: pydantic, pydantic_settings
System role: SQS job submission configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from bgupload.configs.base import BaseSettings


class QueueSettings(BaseSettings):
    """SQS queue used to hand jobs to the executing process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BGUPLOAD_QUEUE_",
        case_sensitive=False,
        extra="ignore",
    )

    queue_url: str = Field(default="", description="SQS queue URL for upload jobs")
    region: str = Field(default="ap-southeast-2", description="AWS region for the queue")
