"""
Job state domain models.

JobState is the durable record kept per job identifier. Its status is a
tagged variant:

PENDING: Never attempted
IN_PROGRESS: Currently or most recently executing, with the attempt number
COMPLETED: Terminal success
FAILED: Most recent attempt failed; not terminal by itself

Dependencies: pydantic
System role: Durable job state contracts
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from bgupload.models.common import MetadataBag


class ErrorPayload(BaseModel):
    """Serialisable record of the error that failed an attempt."""

    model_config = ConfigDict(frozen=True)

    error_type: str
    message: str
    retryable: bool = True
    details: MetadataBag = Field(default_factory=dict)


class Pending(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pending"] = "pending"


class InProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["in_progress"] = "in_progress"
    attempt: int = Field(ge=1)


class Completed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["completed"] = "completed"


class Failed(BaseModel):
    """
    Most recent attempt failed.

    Attributes:
        error: What failed the attempt
        attempt: Number of the attempt that failed
        retry_scheduled: True when the caller was told to retry later, so
            the next processing call continues the same retry cycle
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    error: ErrorPayload
    attempt: int = Field(default=1, ge=1)
    retry_scheduled: bool = False


JobStatus = Annotated[
    Union[Pending, InProgress, Completed, Failed],
    Field(discriminator="kind"),
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobState(BaseModel):
    """Durable per-job record; at most one exists per job identifier."""

    model_config = ConfigDict(frozen=True)

    job_identifier: str
    status: JobStatus
    last_updated: datetime = Field(default_factory=_utcnow)
