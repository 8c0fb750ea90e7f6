"""
Upload extension handler.

Process entry point on the executing side. Resolves a pipeline, runs the
job through its processor and always answers with a disposition.

Dependencies: bgupload.application.bridge
System role: Worker entry point returning dispositions
"""

import logging

from bgupload.application.bridge import ConfigurationResolver
from bgupload.models.disposition import Disposition, RetryAfter
from bgupload.models.job import JobDescriptor
from bgupload.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

UNRESOLVED_RETRY_SECONDS = 60.0


class UploadExtensionHandler:
    """Runs jobs handed over by the scheduling mechanism."""

    def __init__(
        self,
        resolver: ConfigurationResolver,
        fallback_delay: float = UNRESOLVED_RETRY_SECONDS,
    ) -> None:
        """
        Initialize handler.

        Args:
            resolver: Strategies yielding the pipeline and configuration
            fallback_delay: Retry delay when no pipeline can be resolved or
                processing fails outside the retry policy
        """
        self._resolver = resolver
        self._fallback_delay = fallback_delay

    async def process(self, job: JobDescriptor) -> Disposition:
        """
        Process one job.

        Never raises for ordinary errors: an unresolvable pipeline or a
        failure escaping the processor (for example an unavailable state
        store) becomes RetryAfter(fallback_delay).

        Args:
            job: Job to process

        Returns:
            Disposition: Outcome for the scheduling mechanism
        """
        resolved = self._resolver.resolve()
        if resolved is None:
            logger.warning(
                "%s:process - No pipeline available, deferring job",
                __name__,
                extra={"job_identifier": job.local_identifier},
            )
            return RetryAfter(delay=self._fallback_delay)

        try:
            return await resolved.pipeline.processor.process(job, resolved.configuration)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:process - Processing failed outside retry policy",
                e,
                job_identifier=job.local_identifier,
            )
            return RetryAfter(delay=self._fallback_delay)
