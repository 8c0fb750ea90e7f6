"""
Background upload manager.

Entry point for producers: owns the scheduler and keeps the pipeline
registry (and optionally the durable configuration store) in sync with the
producer's configuration and factory.

Dependencies: bgupload.application.scheduler, bgupload.application.bridge
System role: Producer-side facade
"""

import logging
from typing import Iterable, Optional

from bgupload.application.bridge import PipelineRegistry
from bgupload.application.config_store import ConfigurationStore
from bgupload.application.scheduler import CustomizeRequest, KindDiscovery, UploadScheduler
from bgupload.boundary.queue.submitter import JobSubmitter
from bgupload.core.pipeline import PipelineFactory
from bgupload.models.common import MetadataBag
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor

logger = logging.getLogger(__name__)


class BackgroundUploadManager:
    """Enqueues uploads and publishes configuration to workers."""

    def __init__(
        self,
        configuration: UploadConfiguration,
        pipeline_factory: PipelineFactory,
        submitter: JobSubmitter,
        registry: PipelineRegistry,
        configuration_store: Optional[ConfigurationStore] = None,
        kind_discovery: Optional[KindDiscovery] = None,
    ) -> None:
        """
        Initialize manager and publish the initial configuration.

        Args:
            configuration: Run configuration
            pipeline_factory: Factory workers use to build their pipeline
            submitter: Scheduling mechanism for jobs
            registry: Registry shared with in-process workers
            configuration_store: Durable store for out-of-process workers
            kind_discovery: Resource kinds to request per asset
        """
        self.configuration = configuration
        self._pipeline_factory = pipeline_factory
        self._registry = registry
        self._configuration_store = configuration_store
        self._scheduler = UploadScheduler(configuration, submitter, kind_discovery)
        self.synchronize_pipeline()

    @property
    def pipeline_factory(self) -> PipelineFactory:
        return self._pipeline_factory

    async def enqueue_assets(
        self,
        asset_identifiers: Iterable[str],
        user_info: Optional[MetadataBag] = None,
        customize: Optional[CustomizeRequest] = None,
    ) -> list[JobDescriptor]:
        """Enqueue one job per asset. See UploadScheduler.enqueue_assets."""
        return await self._scheduler.enqueue_assets(
            asset_identifiers,
            user_info=user_info,
            customize=customize,
        )

    def synchronize_pipeline(self) -> None:
        """
        Push the current factory and configuration to workers.

        Call after producer-side settings change.

        Raises:
            ConfigurationError: The configuration cannot be persisted
        """
        self._registry.register(self._pipeline_factory)
        self._registry.update_configuration(self.configuration)
        if self._configuration_store is not None:
            self._configuration_store.save(self.configuration)
        logger.info(
            "%s:synchronize_pipeline - Pipeline synchronized",
            __name__,
            extra={"extension_target": self.configuration.extension_target},
        )

    def update_pipeline_factory(self, factory: PipelineFactory) -> None:
        """
        Replace the pipeline factory and resynchronize.

        Args:
            factory: New factory
        """
        self._pipeline_factory = factory
        self.synchronize_pipeline()
