"""
Core business logic module.

Contains the retry policy, the exception hierarchy and the job processor.
"""

from bgupload.core.exceptions import (
    AssetNotFound,
    ConfigurationError,
    ResourcesMissing,
    RetryRequestedError,
    SubmissionError,
    TransportError,
    UnsupportedResource,
    UploadPipelineError,
)
from bgupload.core.retry_policy import RetryPolicy

__all__ = [
    "UploadPipelineError",
    "AssetNotFound",
    "ResourcesMissing",
    "UnsupportedResource",
    "TransportError",
    "RetryRequestedError",
    "ConfigurationError",
    "SubmissionError",
    "RetryPolicy",
]
