"""
Upload scheduler.

Producer-side enqueue operation: turns asset identifiers into job
descriptors and hands each to a JobSubmitter.

Per asset:
1. Merge user info (call-supplied keys override configuration defaults)
2. Discover resource kinds to request (empty means every resource)
3. Build a JobRequest from configuration and let the caller customise it
4. Snapshot the request into a JobDescriptor and submit it

Dependencies: bgupload.boundary.queue, bgupload.models
System role: Job creation on the producer side
"""

import logging
from typing import Callable, Iterable, Optional

from bgupload.boundary.queue.submitter import JobSubmitter
from bgupload.core.exceptions import SubmissionError
from bgupload.models.common import MetadataBag, ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor, JobRequest

logger = logging.getLogger(__name__)

KindDiscovery = Callable[[str], Iterable[ResourceKind]]
CustomizeRequest = Callable[[JobRequest], None]


class UploadScheduler:
    """Creates and submits upload jobs for assets."""

    def __init__(
        self,
        configuration: UploadConfiguration,
        submitter: JobSubmitter,
        kind_discovery: Optional[KindDiscovery] = None,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            configuration: Source of job defaults
            submitter: Scheduling mechanism jobs are handed to
            kind_discovery: Returns the kinds to request for an asset;
                omitted requests every resource
        """
        self.configuration = configuration
        self._submitter = submitter
        self._kind_discovery = kind_discovery

    def build_request(self, asset_identifier: str, user_info: Optional[MetadataBag] = None) -> JobRequest:
        """
        Build the default request for one asset.

        Args:
            asset_identifier: Asset to upload
            user_info: Per-call metadata, overriding configuration defaults

        Returns:
            JobRequest: Mutable request ready for customisation
        """
        merged = dict(self.configuration.default_user_info)
        merged.update(user_info or {})

        kinds = list(self._kind_discovery(asset_identifier)) if self._kind_discovery else []

        return JobRequest(
            asset_identifier=asset_identifier,
            extension_target=self.configuration.extension_target,
            transport_identifier=self.configuration.transport_identifier,
            allows_cellular_access=self.configuration.allows_cellular_access,
            is_user_initiated=self.configuration.is_user_initiated,
            user_info=merged,
            requested_resource_kinds=kinds,
        )

    async def enqueue_assets(
        self,
        asset_identifiers: Iterable[str],
        user_info: Optional[MetadataBag] = None,
        customize: Optional[CustomizeRequest] = None,
    ) -> list[JobDescriptor]:
        """
        Enqueue one job per asset.

        A submission failure for one asset is logged and that asset is
        skipped; the rest of the batch is still submitted.

        Args:
            asset_identifiers: Assets to upload, in order
            user_info: Metadata attached to every job of this call
            customize: Called with each request before it is snapshotted

        Returns:
            list[JobDescriptor]: Descriptors of the jobs submitted
        """
        descriptors: list[JobDescriptor] = []
        skipped = 0

        for asset_identifier in asset_identifiers:
            request = self.build_request(asset_identifier, user_info)
            if customize is not None:
                customize(request)
            descriptor = request.make_descriptor()

            try:
                await self._submitter.submit(request, descriptor)
            except SubmissionError as e:
                skipped += 1
                logger.warning(
                    "%s:enqueue_assets - Skipping asset: %s",
                    __name__,
                    e.message,
                    extra={"asset_identifier": asset_identifier},
                )
                continue

            descriptors.append(descriptor)

        logger.info(
            "%s:enqueue_assets - Enqueued jobs",
            __name__,
            extra={"submitted": len(descriptors), "skipped": skipped},
        )
        return descriptors
