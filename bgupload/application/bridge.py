"""
Pipeline registry and configuration resolution.

The producer side pushes its pipeline factory and configuration into a
PipelineRegistry; the executing side asks a ConfigurationResolver for a
ready pipeline. The registry is only a best-effort in-process cache: a
worker running in another process falls through to the durable
configuration store or to a statically supplied configuration.

Dependencies: threading (stdlib), bgupload.core.pipeline
System role: Hand-off of configuration and components to the worker
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from bgupload.application.config_store import ConfigurationStore
from bgupload.core.exceptions import ResourcesMissing
from bgupload.core.pipeline import Pipeline, PipelineFactory
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor
from bgupload.models.resource import ResourceContext
from bgupload.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPipeline:
    pipeline: Pipeline
    configuration: UploadConfiguration


class PipelineRegistry:
    """
    In-process cache of the current factory, configuration and pipeline.

    Created by the composition root and passed explicitly to producers and
    handlers that share a process. All mutations hold one lock, so
    concurrent register/update/resolve calls see a consistent triple.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._factory: Optional[PipelineFactory] = None
        self._configuration: Optional[UploadConfiguration] = None
        self._pipeline: Optional[Pipeline] = None

    def _rebuild(self) -> None:
        if self._factory is not None and self._configuration is not None:
            self._pipeline = self._factory.make_pipeline(self._configuration)

    def register(self, factory: PipelineFactory) -> None:
        """
        Bind a pipeline factory, rebuilding the cached pipeline if a
        configuration is already known.

        Args:
            factory: Factory used for subsequent builds
        """
        with self._lock:
            self._factory = factory
            self._pipeline = None
            self._rebuild()

    def update_configuration(self, configuration: UploadConfiguration) -> None:
        """
        Store a configuration, rebuilding the cached pipeline if a factory
        is already registered.

        Args:
            configuration: New run configuration
        """
        with self._lock:
            self._configuration = configuration
            self._pipeline = None
            self._rebuild()

    def resolve(self) -> Optional[ResolvedPipeline]:
        """
        Return the cached pipeline and configuration, building lazily.

        Returns:
            ResolvedPipeline | None: None until both a configuration and a
                factory (or a cached pipeline) are available
        """
        with self._lock:
            if self._configuration is None:
                return None
            if self._pipeline is None:
                self._rebuild()
            if self._pipeline is None:
                return None
            return ResolvedPipeline(pipeline=self._pipeline, configuration=self._configuration)

    async def resources(self, job: JobDescriptor) -> list[ResourceContext]:
        """
        Extract resources for a job through the cached pipeline.

        Args:
            job: Job to extract resources for

        Returns:
            list[ResourceContext]: Extracted resources

        Raises:
            ResourcesMissing: No pipeline is available in this process
        """
        resolved = self.resolve()
        if resolved is None:
            raise ResourcesMissing(job.asset_identifier, details={"reason": "pipeline unavailable"})
        return await resolved.pipeline.resource_provider.resources(job, resolved.configuration)

    def clear(self) -> None:
        """Forget factory, configuration and cached pipeline."""
        with self._lock:
            self._factory = None
            self._configuration = None
            self._pipeline = None


class ResolutionStrategy(ABC):
    """One way of obtaining a pipeline for the current process."""

    name: str = "strategy"

    @abstractmethod
    def resolve(self) -> Optional[ResolvedPipeline]:
        """Return a pipeline, or None when this strategy has nothing to offer."""
        ...


class RegistryStrategy(ResolutionStrategy):
    """Use whatever the producer pushed into the shared registry."""

    name = "registry"

    def __init__(self, registry: PipelineRegistry) -> None:
        self._registry = registry

    def resolve(self) -> Optional[ResolvedPipeline]:
        return self._registry.resolve()


class DurableStoreStrategy(ResolutionStrategy):
    """
    Reload the configuration the producer persisted and build a pipeline.

    When a registry is given the reloaded configuration is cached there, so
    later jobs in the same process skip the file read.
    """

    name = "durable_store"

    def __init__(
        self,
        store: ConfigurationStore,
        factory: PipelineFactory,
        registry: Optional[PipelineRegistry] = None,
    ) -> None:
        self._store = store
        self._factory = factory
        self._registry = registry

    def resolve(self) -> Optional[ResolvedPipeline]:
        configuration = self._store.load()
        if configuration is None:
            return None
        if self._registry is not None:
            self._registry.register(self._factory)
            self._registry.update_configuration(configuration)
            return self._registry.resolve()
        return ResolvedPipeline(
            pipeline=self._factory.make_pipeline(configuration),
            configuration=configuration,
        )


class StaticStrategy(ResolutionStrategy):
    """Build from a configuration supplied by the worker itself."""

    name = "static"

    def __init__(self, configuration: UploadConfiguration, factory: PipelineFactory) -> None:
        self._configuration = configuration
        self._factory = factory

    def resolve(self) -> Optional[ResolvedPipeline]:
        return ResolvedPipeline(
            pipeline=self._factory.make_pipeline(self._configuration),
            configuration=self._configuration,
        )


class ConfigurationResolver:
    """Tries strategies in order and returns the first pipeline found."""

    def __init__(self, strategies: Sequence[ResolutionStrategy]) -> None:
        self._strategies = list(strategies)

    def resolve(self) -> Optional[ResolvedPipeline]:
        """
        Resolve a pipeline.

        A strategy that raises is logged and skipped.

        Returns:
            ResolvedPipeline | None: First successful resolution
        """
        for strategy in self._strategies:
            try:
                resolved = strategy.resolve()
            except Exception as e:
                log_exception_with_context(
                    logger,
                    f"{__name__}:resolve - Strategy failed",
                    e,
                    strategy=strategy.name,
                )
                continue
            if resolved is not None:
                logger.debug(
                    "%s:resolve - Pipeline resolved",
                    __name__,
                    extra={"strategy": strategy.name},
                )
                return resolved
        return None
