"""
Job processor.

Runs one attempt of an upload job end to end and turns the result into a
disposition for the caller:

load prior state -> compute attempt -> record InProgress -> extract
resources -> upload each in order -> record Completed or Failed

Every state transition is written to the store before the next step runs,
so a process that dies mid-attempt leaves InProgress(n) behind and the next
invocation continues with attempt n + 1.

Dependencies: bgupload.boundary.state, bgupload.boundary.resources,
    bgupload.boundary.transport
System role: Orchestrator of job state, extraction, upload and retry decisions
"""

import logging
from typing import Optional

from bgupload.boundary.resources.provider import ResourceProvider
from bgupload.boundary.state.store import JobStateStore
from bgupload.boundary.transport.base import Transport
from bgupload.core.exceptions import (
    ResourcesMissing,
    RetryRequestedError,
    UploadPipelineError,
    error_payload_for,
)
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.disposition import Disposition, FailedTerminal, Finished, RetryAfter
from bgupload.models.job import JobContext, JobDescriptor
from bgupload.models.state import (
    Completed,
    Failed,
    InProgress,
    JobState,
    JobStatus,
)
from bgupload.models.upload import RetryRequested
from bgupload.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def next_attempt(prior: Optional[JobState]) -> int:
    """
    Attempt number for the next processing call.

    InProgress(n) means the previous attempt was interrupted, so it counts.
    Failed with a scheduled retry continues the same retry cycle. Anything
    else (absent, Pending, Completed, Failed without retry) starts over.

    Args:
        prior: Stored state, if any

    Returns:
        int: 1-based attempt number
    """
    if prior is None:
        return 1
    status = prior.status
    if isinstance(status, InProgress):
        return status.attempt + 1
    if isinstance(status, Failed) and status.retry_scheduled:
        return status.attempt + 1
    return 1


class JobProcessor:
    """Executes upload attempts against injected collaborators."""

    def __init__(
        self,
        transport: Transport,
        job_store: JobStateStore,
        resource_provider: ResourceProvider,
    ) -> None:
        """
        Initialize processor.

        Args:
            transport: Sends one resource per call
            job_store: Durable per-job state
            resource_provider: Extracts resources for a job's asset
        """
        self.transport = transport
        self.job_store = job_store
        self.resource_provider = resource_provider

    async def _record(self, job: JobDescriptor, status: JobStatus) -> None:
        await self.job_store.record(JobState(job_identifier=job.local_identifier, status=status))

    async def process(
        self,
        job: JobDescriptor,
        configuration: UploadConfiguration,
    ) -> Disposition:
        """
        Run one attempt of a job.

        Extraction and upload failures never escape: they are recorded and
        mapped to RetryAfter or FailedTerminal. State store failures do
        escape, as does cancellation (leaving InProgress recorded).

        Args:
            job: Job to process
            configuration: Run configuration, including the retry policy

        Returns:
            Disposition: Finished, RetryAfter(delay) or FailedTerminal(error)
        """
        prior = await self.job_store.load_state(job.local_identifier)
        attempt = next_attempt(prior)
        await self._record(job, InProgress(attempt=attempt))

        logger.info(
            "%s:process - Starting attempt",
            __name__,
            extra={
                "job_identifier": job.local_identifier,
                "asset_identifier": job.asset_identifier,
                "attempt": attempt,
            },
        )

        context = JobContext(job=job, attempt=attempt)
        try:
            resources = await self.resource_provider.resources(job, configuration)
            if not resources:
                raise ResourcesMissing(
                    job.asset_identifier,
                    requested_kinds=[kind.value for kind in job.requested_resource_kinds],
                )

            for resource in resources:
                response = await self.transport.upload(context, resource, configuration)
                if isinstance(response.outcome, RetryRequested):
                    raise RetryRequestedError(response.outcome.after)
        except Exception as e:
            return await self._fail(job, attempt, e, configuration)

        await self._record(job, Completed())
        logger.info(
            "%s:process - Job completed",
            __name__,
            extra={
                "job_identifier": job.local_identifier,
                "attempt": attempt,
                "resource_count": len(resources),
            },
        )
        return Finished()

    def _retry_delay(
        self,
        error: Exception,
        attempt: int,
        configuration: UploadConfiguration,
    ) -> Optional[float]:
        if isinstance(error, UploadPipelineError) and not error.retryable:
            return None
        if isinstance(error, RetryRequestedError) and error.after > 0:
            return error.after
        try:
            return configuration.retry_policy.delay(attempt)
        except Exception as policy_error:
            # A policy that cannot answer ends the cycle.
            log_exception_with_context(
                logger,
                f"{__name__}:process - Retry policy raised, failing terminally",
                policy_error,
                attempt=attempt,
            )
            return None

    async def _fail(
        self,
        job: JobDescriptor,
        attempt: int,
        error: Exception,
        configuration: UploadConfiguration,
    ) -> Disposition:
        delay = self._retry_delay(error, attempt, configuration)
        retry = delay is not None and delay > 0

        await self._record(
            job,
            Failed(error=error_payload_for(error), attempt=attempt, retry_scheduled=retry),
        )

        if retry:
            logger.warning(
                "%s:process - Attempt failed, retry scheduled: %s",
                __name__,
                type(error).__name__,
                extra={
                    "job_identifier": job.local_identifier,
                    "attempt": attempt,
                    "retry_delay": delay,
                },
            )
            return RetryAfter(delay=delay)

        logger.error(
            "%s:process - Attempt failed terminally: %s",
            __name__,
            type(error).__name__,
            extra={"job_identifier": job.local_identifier, "attempt": attempt},
        )
        return FailedTerminal(error=error)

    async def reset(self, job_identifier: str) -> None:
        """
        Forget a job's state so its next run starts at attempt 1.

        Args:
            job_identifier: Job to reset
        """
        await self.job_store.reset(job_identifier)
