"""
HTTP upload transport.

POSTs each resource as a raw octet stream to a single endpoint. Tracing
headers identify the transport, job, attempt and original filename.

Status policy:
2xx: completed
429 / 503: retry requested, honouring a positive Retry-After header
anything else: TransportError

Dependencies: httpx
System role: Default Transport implementation
"""

import logging
import math
from typing import Iterable, Optional

import httpx

from bgupload.boundary.transport.base import Transport
from bgupload.core.exceptions import TransportError, UnsupportedResource
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobContext
from bgupload.models.resource import ResourceContext
from bgupload.models.upload import RetryRequested, UploadCompleted, UploadResponse

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 503})


def parse_retry_after(value: Optional[str]) -> float:
    """
    Parse a Retry-After header given in seconds.

    HTTP-date values, non-finite numbers and garbage are treated as absent.

    Args:
        value: Raw header value

    Returns:
        float: Positive seconds, or 0.0 when absent or unusable
    """
    if not value:
        return 0.0
    try:
        seconds = float(value.strip())
    except ValueError:
        return 0.0
    if not math.isfinite(seconds) or seconds <= 0:
        return 0.0
    return seconds


class HttpUploadTransport(Transport):
    """Transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        endpoint_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0,
        supported_kinds: Optional[Iterable[ResourceKind | str]] = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            endpoint_url: URL receiving one POST per resource
            client: Shared httpx client (one is created and owned if omitted)
            timeout: Request timeout in seconds for an owned client
            supported_kinds: Kinds this transport accepts; None accepts all
        """
        self._endpoint_url = endpoint_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._supported_kinds = (
            frozenset(ResourceKind(kind) for kind in supported_kinds)
            if supported_kinds
            else None
        )

    def _check_supported(self, resource: ResourceContext) -> None:
        if self._supported_kinds is None:
            return
        if resource.resource_kind not in self._supported_kinds:
            kind = resource.resource_kind.value if resource.resource_kind else None
            raise UnsupportedResource(
                f"Transport does not support resource kind: {kind}",
                resource_kind=kind,
                details={"job_identifier": resource.job_identifier},
            )

    def _headers(
        self,
        job_context: JobContext,
        resource: ResourceContext,
        configuration: UploadConfiguration,
    ) -> dict[str, str]:
        headers = {
            "Content-Type": "application/octet-stream",
            "X-Background-Transport": configuration.transport_identifier,
            "X-Job-Identifier": job_context.job.local_identifier,
            "X-Upload-Attempt": str(job_context.attempt),
        }
        if resource.filename:
            headers["X-Resource-Filename"] = resource.filename
        return headers

    async def upload(
        self,
        job_context: JobContext,
        resource: ResourceContext,
        configuration: UploadConfiguration,
    ) -> UploadResponse:
        self._check_supported(resource)

        payload = await resource.read()
        headers = self._headers(job_context, resource, configuration)

        try:
            response = await self._client.post(
                self._endpoint_url,
                content=payload,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning(
                "%s:upload - %s: %s",
                __name__,
                type(e).__name__,
                e,
                extra={"job_identifier": job_context.job.local_identifier},
            )
            raise TransportError(
                f"Upload request failed: {type(e).__name__}",
                details={"endpoint": self._endpoint_url},
            ) from e

        status = response.status_code
        if 200 <= status < 300:
            logger.info(
                "%s:upload - Resource uploaded",
                __name__,
                extra={
                    "job_identifier": job_context.job.local_identifier,
                    "attempt": job_context.attempt,
                    "status_code": status,
                    "byte_count": len(payload),
                },
            )
            return UploadResponse(
                outcome=UploadCompleted(
                    response_metadata={"response_length": len(response.content)},
                ),
                metadata={
                    "byte_count": len(payload),
                    "response_length": len(response.content),
                    "status_code": status,
                },
            )

        if status in RETRYABLE_STATUS_CODES:
            after = parse_retry_after(response.headers.get("Retry-After"))
            logger.info(
                "%s:upload - Endpoint requested retry",
                __name__,
                extra={
                    "job_identifier": job_context.job.local_identifier,
                    "status_code": status,
                    "retry_after": after,
                },
            )
            return UploadResponse(
                outcome=RetryRequested(after=after),
                metadata={"status_code": status},
            )

        raise TransportError(
            f"Upload rejected with status {status}",
            status_code=status,
            details={"endpoint": self._endpoint_url},
        )

    async def aclose(self) -> None:
        """Close the underlying client when this transport created it."""
        if self._owns_client:
            await self._client.aclose()
