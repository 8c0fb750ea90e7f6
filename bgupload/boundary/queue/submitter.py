"""
Job submitter interface.

A submitter hands one job to the host scheduling mechanism. Scheduling
options (extension target, network and priority hints) travel with the
descriptor so the mechanism can honour them.

Dependencies: bgupload.models.job
System role: Producer-side boundary to the scheduler
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from bgupload.models.job import JobDescriptor, JobRequest

logger = logging.getLogger(__name__)


class JobSubmitter(ABC):
    """Hands jobs to the scheduling mechanism."""

    @abstractmethod
    async def submit(self, request: JobRequest, descriptor: JobDescriptor) -> None:
        """
        Submit one job.

        Args:
            request: Customised request carrying scheduling options
            descriptor: Immutable job snapshot the worker will receive

        Raises:
            SubmissionError: The mechanism rejected the job
        """
        ...


@dataclass(frozen=True)
class SubmittedJob:
    request: JobRequest
    descriptor: JobDescriptor


class InMemoryJobSubmitter(JobSubmitter):
    """Records submissions in order. Used for previews and tests."""

    def __init__(self) -> None:
        self.submitted: list[SubmittedJob] = []

    async def submit(self, request: JobRequest, descriptor: JobDescriptor) -> None:
        self.submitted.append(SubmittedJob(request=request.model_copy(deep=True), descriptor=descriptor))
        logger.debug(
            "%s:submit - Recorded job",
            __name__,
            extra={"job_identifier": descriptor.local_identifier},
        )

    @property
    def descriptors(self) -> list[JobDescriptor]:
        return [item.descriptor for item in self.submitted]
