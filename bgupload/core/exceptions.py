"""
Exception hierarchy for the upload pipeline.

Every pipeline error carries a message, a details dict for observability,
and a retryable flag the job processor consults before asking the retry
policy for a delay.

Dependencies: bgupload.models.state
System role: Centralized error taxonomy
"""

from typing import Any

from bgupload.models.state import ErrorPayload


class UploadPipelineError(Exception):
    """Base exception for all upload pipeline errors."""

    retryable: bool = True

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_payload(self) -> ErrorPayload:
        """
        Convert to the serialisable record stored in JobState.

        Returns:
            ErrorPayload: Error record
        """
        return ErrorPayload(
            error_type=type(self).__name__,
            message=self.message,
            retryable=self.retryable,
            details={key: _jsonable(value) for key, value in self.details.items()},
        )


class AssetNotFound(UploadPipelineError):
    """Raised when the referenced asset no longer exists or is inaccessible."""

    retryable = False

    def __init__(self, asset_identifier: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["asset_identifier"] = asset_identifier
        super().__init__(f"Asset not found: {asset_identifier}", details)


class ResourcesMissing(UploadPipelineError):
    """Raised when no uploadable payload could be extracted for a job."""

    def __init__(
        self,
        asset_identifier: str,
        requested_kinds: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["asset_identifier"] = asset_identifier
        if requested_kinds:
            details["requested_kinds"] = requested_kinds
        super().__init__(f"No resources available for asset: {asset_identifier}", details)


class UnsupportedResource(UploadPipelineError):
    """Raised when the transport cannot handle a resource in this runtime."""

    retryable = False

    def __init__(
        self,
        message: str,
        resource_kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if resource_kind:
            details["resource_kind"] = resource_kind
        super().__init__(message, details)


class TransportError(UploadPipelineError):
    """Raised when an upload fails on the network or is rejected by status policy."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize transport error.

        Args:
            message: Error message
            status_code: HTTP status code when the server answered
            details: Additional context
        """
        self.status_code = status_code
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class RetryRequestedError(UploadPipelineError):
    """Soft failure: the transport asked for the attempt to be retried later."""

    def __init__(self, after: float, details: dict[str, Any] | None = None) -> None:
        self.after = after
        details = details or {}
        details["retry_after"] = after
        super().__init__(f"Transport requested retry after {after}s", details)


class ConfigurationError(UploadPipelineError):
    """Raised when a configuration cannot be stored, loaded or resolved."""

    retryable = False


class SubmissionError(UploadPipelineError):
    """Raised when a job cannot be handed to the scheduling mechanism."""

    def __init__(self, message: str, asset_identifier: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["asset_identifier"] = asset_identifier
        super().__init__(message, details)


def error_payload_for(exc: BaseException) -> ErrorPayload:
    """
    Build an ErrorPayload for any exception raised during an attempt.

    Errors outside the pipeline hierarchy are treated as retryable.

    Args:
        exc: Exception raised during extraction or upload

    Returns:
        ErrorPayload: Error record
    """
    if isinstance(exc, UploadPipelineError):
        return exc.to_payload()
    return ErrorPayload(
        error_type=type(exc).__name__,
        message=str(exc),
        retryable=True,
    )


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return str(value)
