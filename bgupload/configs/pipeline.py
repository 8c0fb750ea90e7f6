"""
Pipeline default configuration.

Environment-driven defaults for UploadConfiguration, plus the location of
the durable configuration store shared by producer and worker processes.

Dependencies: pydantic, pydantic_settings
System role: Upload job defaults
"""

from pydantic import Field

from bgupload.configs.base import BaseSettings


class PipelineDefaults(BaseSettings):
    """Defaults applied to every upload job."""

    extension_target: str = Field(
        default="bgupload.worker",
        description="Identifier of the execution endpoint that receives jobs",
    )
    transport_identifier: str = Field(
        default="default.transport",
        description="Routing key for multi-transport setups",
    )
    allows_cellular_access: bool = Field(default=True, description="Allow constrained networks")
    is_user_initiated: bool = Field(default=False, description="Priority hint to the scheduler")
    maximum_concurrent_uploads: int = Field(
        default=2,
        description="Resources extracted concurrently per job (clamped to >= 1)",
    )

    retry_initial_seconds: float = Field(default=5.0, description="First retry delay")
    retry_multiplier: float = Field(default=2.0, description="Backoff multiplier")
    retry_maximum_seconds: float = Field(default=300.0, description="Retry delay ceiling")

    config_store_path: str = Field(
        default="./.bgupload/configuration.json",
        description="Shared file the producer writes and workers reload configuration from",
    )
