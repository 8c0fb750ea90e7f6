"""
S3 resource provider.

Reads resources from an S3 bucket laid out as
<prefix><asset_identifier>/<kind>/<filename>. boto3 is synchronous, so
every call runs in a worker thread; throttling and transient service
errors are retried with tenacity before surfacing to the job processor.

Dependencies: boto3, botocore, tenacity
System role: ResourceProvider for S3-hosted asset libraries
"""

import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from bgupload.boundary.resources.provider import (
    ResourceProvider,
    gather_bounded,
    parse_layout,
    select_requested,
)
from bgupload.core.exceptions import AssetNotFound, TransportError
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor
from bgupload.models.resource import ResourceContext

logger = logging.getLogger(__name__)

_TRANSIENT_CODES = {
    "Throttling",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
    "InternalError",
    "ServiceUnavailable",
    "503",
}
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, EndpointConnectionError):
        return True
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") in _TRANSIENT_CODES
    return False


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


_s3_retry = retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(4),
    wait=wait_exponential_jitter(initial=0.5, max=8, jitter=1),
    before_sleep=lambda retry_state: logger.warning(
        "%s:s3 - Retry %s/4 after transient S3 error",
        __name__,
        retry_state.attempt_number,
    ),
    reraise=True,
)


class S3ResourceProvider(ResourceProvider):
    """Provider over an S3 bucket of assets."""

    def __init__(
        self,
        bucket: str,
        key_prefix: str = "assets/",
        region: str = "ap-southeast-2",
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize S3 resource provider.

        Args:
            bucket: S3 bucket name holding asset resources
            key_prefix: Key prefix under which asset directories live
            region: AWS region for S3 bucket
            client: Pre-built boto3 S3 client (created from region if omitted)
        """
        self._bucket = bucket
        self._key_prefix = key_prefix
        self._s3_client = client or boto3.client("s3", region_name=region)

    def _asset_prefix(self, asset_identifier: str) -> str:
        return f"{self._key_prefix}{asset_identifier.strip('/')}/"

    @_s3_retry
    def _list_keys(self, prefix: str) -> list[str]:
        paginator = self._s3_client.get_paginator("list_objects_v2")
        keys: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            keys.extend(item["Key"] for item in page.get("Contents", []))
        return keys

    @_s3_retry
    def _head(self, key: str) -> dict:
        return self._s3_client.head_object(Bucket=self._bucket, Key=key)

    @_s3_retry
    def _get_bytes(self, key: str) -> bytes:
        response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        return response["Body"].read()

    async def _load(self, key: str) -> bytes:
        try:
            return await asyncio.to_thread(self._get_bytes, key)
        except ClientError as e:
            raise TransportError(
                f"Failed to read resource from S3: {_error_code(e)}",
                details={"s3_key": key},
            ) from e

    async def resources(
        self,
        job: JobDescriptor,
        configuration: UploadConfiguration,
    ) -> list[ResourceContext]:
        prefix = self._asset_prefix(job.asset_identifier)
        try:
            keys = await asyncio.to_thread(self._list_keys, prefix)
        except ClientError as e:
            if _error_code(e) in ("NoSuchBucket", "AccessDenied"):
                raise AssetNotFound(job.asset_identifier, {"s3_error": _error_code(e)}) from e
            raise
        except BotoCoreError as e:
            raise TransportError(f"Failed to list asset resources: {e}") from e

        if not keys:
            raise AssetNotFound(job.asset_identifier, {"bucket": self._bucket, "prefix": prefix})

        candidates: list[tuple[ResourceKind, tuple[str, str]]] = []
        for key in sorted(keys):
            parsed = parse_layout(key[len(prefix):])
            if parsed is None:
                logger.warning(
                    "%s:resources - Skipping key outside <kind>/<filename> layout",
                    __name__,
                    extra={"s3_key": key},
                )
                continue
            kind, filename = parsed
            candidates.append((kind, (key, filename)))

        selected = select_requested(job, candidates)

        def extract(kind: ResourceKind, key: str, filename: str):
            async def run() -> ResourceContext:
                try:
                    head = await asyncio.to_thread(self._head, key)
                except ClientError as e:
                    if _error_code(e) in _MISSING_CODES:
                        raise AssetNotFound(job.asset_identifier, {"s3_key": key}) from e
                    raise
                return ResourceContext(
                    job_identifier=job.local_identifier,
                    asset_identifier=job.asset_identifier,
                    resource_kind=kind,
                    filename=filename,
                    byte_size=head.get("ContentLength"),
                    loader=lambda: self._load(key),
                )

            return run

        contexts = await gather_bounded(
            configuration.maximum_concurrent_uploads,
            [extract(kind, key, filename) for kind, (key, filename) in selected],
        )
        logger.info(
            "%s:resources - Extracted resources",
            __name__,
            extra={"job_identifier": job.local_identifier, "resource_count": len(contexts)},
        )
        return contexts
