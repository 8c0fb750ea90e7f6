"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator
"""

from functools import lru_cache

from pydantic import Field

from bgupload.configs.base import BaseSettings
from bgupload.configs.pipeline import PipelineDefaults
from bgupload.configs.queue import QueueSettings
from bgupload.configs.resources import ResourceSettings
from bgupload.configs.state_store import StateStoreSettings
from bgupload.configs.transport import TransportSettings
from bgupload.core.retry_policy import RetryPolicy
from bgupload.models.configuration import UploadConfiguration


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings, read from the environment per instance
    pipeline: PipelineDefaults = Field(default_factory=PipelineDefaults)
    state_store: StateStoreSettings = Field(default_factory=StateStoreSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    resources: ResourceSettings = Field(default_factory=ResourceSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)

    def to_configuration(self) -> UploadConfiguration:
        """
        Build the run configuration from environment defaults.

        Returns:
            UploadConfiguration: Immutable configuration for one run
        """
        defaults = self.pipeline
        return UploadConfiguration(
            extension_target=defaults.extension_target,
            transport_identifier=defaults.transport_identifier,
            allows_cellular_access=defaults.allows_cellular_access,
            is_user_initiated=defaults.is_user_initiated,
            maximum_concurrent_uploads=defaults.maximum_concurrent_uploads,
            retry_policy=RetryPolicy.exponential_backoff(
                initial=defaults.retry_initial_seconds,
                multiplier=defaults.retry_multiplier,
                maximum=defaults.retry_maximum_seconds,
            ),
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once per process.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
