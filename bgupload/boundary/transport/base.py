"""
Transport interface.

Dependencies: bgupload.models
System role: Contract between the job processor and the wire layer
"""

from abc import ABC, abstractmethod

from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobContext
from bgupload.models.resource import ResourceContext
from bgupload.models.upload import UploadResponse


class Transport(ABC):
    """Sends a single resource payload to the remote endpoint."""

    @abstractmethod
    async def upload(
        self,
        job_context: JobContext,
        resource: ResourceContext,
        configuration: UploadConfiguration,
    ) -> UploadResponse:
        """
        Upload one resource.

        Implementations read the resource payload once per call. A
        RetryRequested outcome is a soft failure: the processor schedules a
        retry using its `after` value instead of the policy delay.

        Args:
            job_context: Job and current attempt number
            resource: Resource to send
            configuration: Run configuration

        Returns:
            UploadResponse: Completed or retry-requested outcome

        Raises:
            TransportError: Network failure or rejected by status policy
            UnsupportedResource: Resource kind cannot be sent by this transport
        """
        ...
