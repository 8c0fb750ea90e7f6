"""
Lambda handler for SQS-delivered upload jobs.

Each SQS record carries one job (see boundary.queue.build_job_message).
Dispositions map onto SQS semantics using partial batch responses:

Finished / FailedTerminal: acknowledged (deleted by Lambda)
RetryAfter(d): visibility extended to d seconds and reported in
    batchItemFailures, so SQS redelivers the message after the delay

Unparsable records are acknowledged and logged; redelivering them cannot
succeed.

Environment variables: see bgupload.configs (BGUPLOAD_* prefixes)

Dependencies: boto3, botocore, python-dotenv, bgupload.application
System role: Lambda entry point for background uploads
"""

import asyncio
import logging
import math
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

from bgupload.application.bridge import (  # noqa: E402
    ConfigurationResolver,
    DurableStoreStrategy,
    PipelineRegistry,
    RegistryStrategy,
    StaticStrategy,
)
from bgupload.application.config_store import ConfigurationStore  # noqa: E402
from bgupload.application.extension_handler import UploadExtensionHandler  # noqa: E402
from bgupload.application.pipeline_factory import DefaultPipelineFactory  # noqa: E402
from bgupload.boundary.queue.sqs_submitter import parse_job_message  # noqa: E402
from bgupload.configs import Settings, get_settings  # noqa: E402
from bgupload.models.disposition import FailedTerminal, RetryAfter  # noqa: E402
from bgupload.observability.log_utils import log_with_context  # noqa: E402
from bgupload.observability.logger import configure_logging  # noqa: E402

logger = logging.getLogger(__name__)

# SQS rejects visibility timeouts above 12 hours.
MAX_VISIBILITY_SECONDS = 43200


def queue_url_from_arn(arn: str) -> Optional[str]:
    """
    Derive a queue URL from an SQS queue ARN.

    Args:
        arn: arn:aws:sqs:<region>:<account>:<name>

    Returns:
        str | None: Queue URL, or None when the ARN is malformed
    """
    parts = arn.split(":")
    if len(parts) != 6 or parts[2] != "sqs":
        return None
    _, _, _, region, account, name = parts
    return f"https://sqs.{region}.amazonaws.com/{account}/{name}"


def visibility_timeout_for(delay: float) -> int:
    """Whole seconds of visibility for a retry delay, within SQS limits."""
    if math.isnan(delay):
        return 0
    if math.isinf(delay):
        return MAX_VISIBILITY_SECONDS if delay > 0 else 0
    return max(0, min(math.ceil(delay), MAX_VISIBILITY_SECONDS))


def build_extension_handler(settings: Settings) -> tuple[UploadExtensionHandler, DefaultPipelineFactory]:
    """
    Compose the worker side from settings.

    Resolution order: in-process registry, durable configuration store,
    environment defaults.

    Args:
        settings: Process settings

    Returns:
        tuple: Handler and the factory owning its resources
    """
    factory = DefaultPipelineFactory(settings)
    registry = PipelineRegistry()
    resolver = ConfigurationResolver(
        [
            RegistryStrategy(registry),
            DurableStoreStrategy(
                ConfigurationStore(settings.pipeline.config_store_path),
                factory,
                registry,
            ),
            StaticStrategy(settings.to_configuration(), factory),
        ]
    )
    return UploadExtensionHandler(resolver), factory


async def process_batch(
    event: Dict[str, Any],
    extension_handler: UploadExtensionHandler,
    sqs_client: Any,
    queue_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run every record of an SQS event through the extension handler.

    Records are processed sequentially.

    Args:
        event: SQS event with Records array
        extension_handler: Handler producing dispositions
        sqs_client: boto3 SQS client used to extend visibility
        queue_url: Queue URL; derived from each record's eventSourceARN if omitted

    Returns:
        Dict: Partial batch response {"batchItemFailures": [...]}
    """
    failures: list[dict[str, str]] = []

    for record in event.get("Records", []):
        message_id = record.get("messageId")
        try:
            job = parse_job_message(record.get("body") or "")
        except ValueError as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"{__name__}:process_batch - Dropping unparsable message: {type(e).__name__}",
                message_id=message_id,
                body=record.get("body"),
                reason=str(e),
            )
            continue

        disposition = await extension_handler.process(job)

        if isinstance(disposition, RetryAfter):
            failures.append({"itemIdentifier": message_id})
            target_url = queue_url or queue_url_from_arn(record.get("eventSourceARN", ""))
            if target_url is None:
                logger.warning(
                    "%s:process_batch - Queue URL unknown, using default visibility",
                    __name__,
                    extra={"message_id": message_id},
                )
                continue
            timeout = visibility_timeout_for(disposition.delay)
            try:
                await asyncio.to_thread(
                    sqs_client.change_message_visibility,
                    QueueUrl=target_url,
                    ReceiptHandle=record.get("receiptHandle"),
                    VisibilityTimeout=timeout,
                )
            except ClientError as e:
                logger.error(
                    "%s:process_batch - ClientError: %s",
                    __name__,
                    e.response.get("Error", {}).get("Code", "Unknown"),
                    extra={"message_id": message_id},
                )
            else:
                logger.info(
                    "%s:process_batch - Retry scheduled",
                    __name__,
                    extra={
                        "message_id": message_id,
                        "job_identifier": job.local_identifier,
                        "visibility_timeout": timeout,
                    },
                )

        elif isinstance(disposition, FailedTerminal):
            logger.error(
                "%s:process_batch - Job failed terminally: %s",
                __name__,
                type(disposition.error).__name__,
                extra={"message_id": message_id, "job_identifier": job.local_identifier},
            )

        else:
            logger.info(
                "%s:process_batch - Job finished",
                __name__,
                extra={"message_id": message_id, "job_identifier": job.local_identifier},
            )

    return {"batchItemFailures": failures}


async def _run(event: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    extension_handler, factory = build_extension_handler(settings)
    sqs_client = boto3.client("sqs", region_name=settings.queue.region)
    try:
        return await process_batch(
            event,
            extension_handler,
            sqs_client,
            queue_url=settings.queue.queue_url or None,
        )
    finally:
        await factory.aclose()


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for SQS upload job events.

    Args:
        event: SQS event with Records array
        context: Lambda context object

    Returns:
        Dict: Partial batch response for SQS
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        "%s:handler - Received SQS event",
        __name__,
        extra={"record_count": len(event.get("Records", []))},
    )
    return asyncio.run(_run(event, settings))
