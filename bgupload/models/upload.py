"""
Upload response models.

Result of one Transport call, folded into JobState by the job processor.

Dependencies: dataclasses (stdlib)
System role: Transport result contracts
"""

from dataclasses import dataclass, field
from typing import Union

from bgupload.models.common import MetadataBag


@dataclass(frozen=True)
class UploadCompleted:
    """The endpoint accepted the payload."""

    response_metadata: MetadataBag = field(default_factory=dict)


@dataclass(frozen=True)
class RetryRequested:
    """The endpoint asked for the upload to be retried after a delay (seconds)."""

    after: float


UploadOutcome = Union[UploadCompleted, RetryRequested]


@dataclass(frozen=True)
class UploadResponse:
    outcome: UploadOutcome
    metadata: MetadataBag = field(default_factory=dict)
