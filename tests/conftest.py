"""
Shared test fixtures and configuration for entire test suite.

Provides: Job and configuration builders, in-memory and SQLite stores,
static resource providers, scripted transports
Dependencies: pytest, pytest_asyncio, sqlalchemy
System role: Test infrastructure and fixture management
"""

from typing import Callable, Optional

import pytest
import pytest_asyncio

from bgupload.boundary.resources.static_provider import StaticResource, StaticResourceProvider
from bgupload.boundary.state.memory_store import InMemoryJobStateStore
from bgupload.boundary.transport.base import Transport
from bgupload.core.exceptions import TransportError
from bgupload.core.retry_policy import RetryPolicy
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobContext, JobDescriptor
from bgupload.models.resource import ResourceContext
from bgupload.models.upload import UploadCompleted, UploadResponse


class RecordingTransport(Transport):
    """
    Transport whose outcome per call is scripted.

    `behaviour` receives the call index (0-based) and returns an
    UploadResponse or raises.
    """

    def __init__(self, behaviour: Optional[Callable[[int], UploadResponse]] = None) -> None:
        self.behaviour = behaviour or (lambda index: UploadResponse(outcome=UploadCompleted()))
        self.calls: list[tuple[JobContext, ResourceContext]] = []

    async def upload(
        self,
        job_context: JobContext,
        resource: ResourceContext,
        configuration: UploadConfiguration,
    ) -> UploadResponse:
        index = len(self.calls)
        self.calls.append((job_context, resource))
        await resource.read()
        return self.behaviour(index)


def always_fail(index: int) -> UploadResponse:
    raise TransportError("endpoint down", status_code=500)


@pytest.fixture
def configuration() -> UploadConfiguration:
    """Configuration with a short exponential policy (2, 4, 8, 10, 10...)."""
    return UploadConfiguration(
        extension_target="tests.worker",
        retry_policy=RetryPolicy.exponential_backoff(initial=2, multiplier=2, maximum=10),
    )


@pytest.fixture
def job() -> JobDescriptor:
    """Provide job for asset 'asset-1' requesting every resource."""
    return JobDescriptor(local_identifier="job-1", asset_identifier="asset-1")


@pytest.fixture
def job_store() -> InMemoryJobStateStore:
    """Provide empty in-memory job state store."""
    return InMemoryJobStateStore()


@pytest.fixture
def resource_provider() -> StaticResourceProvider:
    """Provide provider serving a photo and a video for 'asset-1'."""
    return StaticResourceProvider(
        {
            "asset-1": [
                StaticResource(ResourceKind.PHOTO, b"photo-bytes", "IMG_0001.HEIC"),
                StaticResource(ResourceKind.PAIRED_VIDEO, b"video-bytes", "IMG_0001.MOV"),
            ]
        }
    )


@pytest.fixture
def transport() -> RecordingTransport:
    """Provide always-succeeding transport."""
    return RecordingTransport()


@pytest.fixture
def failing_transport() -> RecordingTransport:
    """Provide transport raising TransportError on every call."""
    return RecordingTransport(always_fail)


@pytest.fixture
def transport_factory() -> type[RecordingTransport]:
    """Provide RecordingTransport class for scripted behaviours."""
    return RecordingTransport


@pytest_asyncio.fixture
async def sql_engine():
    """
    Create in-memory SQLite async engine for testing.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()
