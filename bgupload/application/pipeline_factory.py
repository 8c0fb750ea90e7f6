"""
Default pipeline factory.

Selects the state store, resource provider and transport from environment
settings. The state store is built once per factory and shared by every
pipeline it makes, so rebuilding after a configuration change keeps job
state intact.

Dependencies: bgupload.configs, bgupload.boundary
System role: Settings-driven composition of pipeline components
"""

import logging
from typing import Optional

import httpx

from bgupload.boundary.resources import (
    FilesystemResourceProvider,
    ResourceProvider,
    S3ResourceProvider,
)
from bgupload.boundary.state import InMemoryJobStateStore, JobStateStore, SqlJobStateStore
from bgupload.boundary.transport import HttpUploadTransport, Transport
from bgupload.configs import Settings, get_settings
from bgupload.core.pipeline import Pipeline, PipelineFactory
from bgupload.models.configuration import UploadConfiguration

logger = logging.getLogger(__name__)


def create_job_store(settings: Settings) -> JobStateStore:
    """
    Build the job state store named by BGUPLOAD_STATE_BACKEND.

    Raises:
        ValueError: If the backend is not 'sql' or 'memory'
    """
    backend = settings.state_store.backend.lower()

    if backend == "sql":
        logger.info("%s:create_job_store - Creating SQL job state store", __name__)
        return SqlJobStateStore.from_url(
            settings.state_store.database_url,
            echo=settings.state_store.echo_sql,
            pool_size=settings.state_store.pool_size,
            max_overflow=settings.state_store.max_overflow,
        )

    elif backend == "memory":
        logger.info("%s:create_job_store - Creating in-memory job state store", __name__)
        return InMemoryJobStateStore()

    else:
        raise ValueError(
            f"Invalid BGUPLOAD_STATE_BACKEND: {backend}. Must be 'sql' or 'memory'."
        )


def create_resource_provider(settings: Settings) -> ResourceProvider:
    """
    Build the resource provider named by BGUPLOAD_RESOURCES_BACKEND.

    Raises:
        ValueError: If the backend is not 'filesystem' or 's3'
    """
    backend = settings.resources.backend.lower()

    if backend == "filesystem":
        return FilesystemResourceProvider(settings.resources.root_directory)

    elif backend == "s3":
        if not settings.resources.bucket:
            raise ValueError("BGUPLOAD_RESOURCES_BUCKET is required for the 's3' backend.")
        return S3ResourceProvider(
            bucket=settings.resources.bucket,
            key_prefix=settings.resources.key_prefix,
            region=settings.resources.region,
        )

    else:
        raise ValueError(
            f"Invalid BGUPLOAD_RESOURCES_BACKEND: {backend}. Must be 'filesystem' or 's3'."
        )


class DefaultPipelineFactory(PipelineFactory):
    """PipelineFactory wired from Settings."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize factory.

        Args:
            settings: Settings to read backends from (process settings if omitted)
            http_client: Shared httpx client handed to every transport
                (created on first use and closed by aclose when omitted)
        """
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._job_store: Optional[JobStateStore] = None

    @property
    def job_store(self) -> JobStateStore:
        if self._job_store is None:
            self._job_store = create_job_store(self._settings)
        return self._job_store

    def make_transport(self) -> Transport:
        transport = self._settings.transport
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=transport.timeout_seconds)
        return HttpUploadTransport(
            endpoint_url=transport.endpoint_url,
            client=self._http_client,
            timeout=transport.timeout_seconds,
            supported_kinds=transport.supported_kinds or None,
        )

    def make_pipeline(self, configuration: UploadConfiguration) -> Pipeline:
        pipeline = Pipeline(
            transport=self.make_transport(),
            job_store=self.job_store,
            resource_provider=create_resource_provider(self._settings),
        )
        logger.info(
            "%s:make_pipeline - Pipeline built",
            __name__,
            extra={
                "extension_target": configuration.extension_target,
                "transport_identifier": configuration.transport_identifier,
            },
        )
        return pipeline

    async def aclose(self) -> None:
        """Release the HTTP client and database engine this factory created."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        if isinstance(self._job_store, SqlJobStateStore):
            await self._job_store.dispose()
        self._job_store = None
