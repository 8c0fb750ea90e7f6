"""
Job submitters.

Hand enqueued jobs to the mechanism that later invokes the worker.

Exports: JobSubmitter, InMemoryJobSubmitter, SqsJobSubmitter
"""

from bgupload.boundary.queue.sqs_submitter import (
    SqsJobSubmitter,
    build_job_message,
    parse_job_message,
)
from bgupload.boundary.queue.submitter import InMemoryJobSubmitter, JobSubmitter, SubmittedJob

__all__ = [
    "JobSubmitter",
    "InMemoryJobSubmitter",
    "SqsJobSubmitter",
    "SubmittedJob",
    "build_job_message",
    "parse_job_message",
]
