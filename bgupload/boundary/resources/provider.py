"""
Resource provider interface and shared extraction helpers.

A provider turns a job into the ResourceContexts to upload. Asset stores
lay resources out as <asset>/<kind>/<filename>; the kind segment must be a
ResourceKind tag.

Dependencies: asyncio (stdlib), bgupload.models
System role: Contract between the job processor and asset stores
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Iterable, Optional, Sequence, TypeVar

from bgupload.core.exceptions import ResourcesMissing
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor
from bgupload.models.resource import ResourceContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResourceProvider(ABC):
    """Extracts uploadable resources for a job's asset."""

    @abstractmethod
    async def resources(
        self,
        job: JobDescriptor,
        configuration: UploadConfiguration,
    ) -> list[ResourceContext]:
        """
        Extract resources for a job.

        Only kinds listed in job.requested_resource_kinds are returned, or
        every resource when that list is empty. Extraction may run
        concurrently up to configuration.maximum_concurrent_uploads; the
        returned order carries no timing meaning.

        Args:
            job: Job to extract resources for
            configuration: Run configuration

        Returns:
            list[ResourceContext]: Non-empty list of resources

        Raises:
            AssetNotFound: The asset no longer exists or is inaccessible
            ResourcesMissing: No matching resource could be extracted
        """
        ...


def parse_layout(relative_path: str) -> Optional[tuple[ResourceKind, str]]:
    """
    Parse "<kind>/<filename>" below an asset root.

    Args:
        relative_path: Path relative to the asset root, "/" separated

    Returns:
        tuple | None: (kind, filename), or None when the path does not match
            the layout or the kind tag is unknown
    """
    parts = [part for part in relative_path.split("/") if part]
    if len(parts) != 2:
        return None
    kind = ResourceKind.parse(parts[0])
    if kind is None:
        return None
    return kind, parts[1]


def select_requested(
    job: JobDescriptor,
    candidates: Sequence[tuple[ResourceKind, T]],
) -> list[tuple[ResourceKind, T]]:
    """
    Keep candidates whose kind the job requested.

    Args:
        job: Job with requested_resource_kinds
        candidates: (kind, item) pairs in asset order

    Returns:
        list: Matching pairs; all candidates when nothing was requested

    Raises:
        ResourcesMissing: Nothing matches
    """
    requested = job.requested_resource_kinds
    if requested:
        selected = [pair for pair in candidates if pair[0] in requested]
    else:
        selected = list(candidates)

    if not selected:
        raise ResourcesMissing(
            job.asset_identifier,
            requested_kinds=[kind.value for kind in requested],
        )
    return selected


async def gather_bounded(limit: int, calls: Iterable[Callable[[], Awaitable[T]]]) -> list[T]:
    """
    Run coroutine factories with at most `limit` in flight.

    Args:
        limit: Maximum concurrent calls (values below 1 run one at a time)
        calls: Zero-argument coroutine functions

    Returns:
        list: Results in the order of `calls`
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(call: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await call()

    return list(await asyncio.gather(*(run(call) for call in calls)))
