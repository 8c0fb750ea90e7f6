"""
SQS job submitter.

Sends one message per job to an SQS queue. The body is the JSON
descriptor plus the request's scheduling options; the worker side parses
it back with parse_job_message.

Dependencies: boto3, botocore
System role: Durable JobSubmitter backed by Amazon SQS
"""

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from bgupload.boundary.queue.submitter import JobSubmitter
from bgupload.core.exceptions import SubmissionError
from bgupload.models.job import JobDescriptor, JobRequest

logger = logging.getLogger(__name__)


def build_job_message(request: JobRequest, descriptor: JobDescriptor) -> str:
    """
    Serialise a job for the queue.

    Args:
        request: Request carrying scheduling options
        descriptor: Job snapshot

    Returns:
        str: JSON message body
    """
    return json.dumps(
        {
            "job": descriptor.model_dump(mode="json"),
            "options": {
                "extension_target": request.extension_target,
                "transport_identifier": request.transport_identifier,
                "allows_cellular_access": request.allows_cellular_access,
                "is_user_initiated": request.is_user_initiated,
            },
        }
    )


def parse_job_message(body: str) -> JobDescriptor:
    """
    Parse a queue message body back into a descriptor.

    Accepts the envelope written by build_job_message or a bare descriptor.

    Args:
        body: JSON message body

    Returns:
        JobDescriptor: Job snapshot

    Raises:
        ValueError: Body is not valid JSON or not a descriptor
    """
    try:
        payload = json.loads(body)
        if isinstance(payload, dict) and "job" in payload:
            payload = payload["job"]
        return JobDescriptor.model_validate(payload)
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid job message: {e}") from e


class SqsJobSubmitter(JobSubmitter):
    """Submitter that enqueues jobs on SQS."""

    def __init__(
        self,
        queue_url: str,
        region: str = "ap-southeast-2",
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize SQS submitter.

        Args:
            queue_url: Target queue URL
            region: AWS region of the queue
            client: Pre-built boto3 SQS client (created from region if omitted)
        """
        self._queue_url = queue_url
        self._sqs_client = client or boto3.client("sqs", region_name=region)

    async def submit(self, request: JobRequest, descriptor: JobDescriptor) -> None:
        body = build_job_message(request, descriptor)
        try:
            response = await asyncio.to_thread(
                self._sqs_client.send_message,
                QueueUrl=self._queue_url,
                MessageBody=body,
                MessageAttributes={
                    "ExtensionTarget": {
                        "DataType": "String",
                        "StringValue": request.extension_target,
                    },
                },
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                "%s:submit - ClientError: %s",
                __name__,
                error_code,
                extra={"job_identifier": descriptor.local_identifier},
            )
            raise SubmissionError(
                f"Failed to enqueue job: {error_code}",
                asset_identifier=descriptor.asset_identifier,
                details={"job_identifier": descriptor.local_identifier},
            ) from e
        except BotoCoreError as e:
            logger.error("%s:submit - %s: %s", __name__, type(e).__name__, e)
            raise SubmissionError(
                f"Failed to enqueue job: {type(e).__name__}",
                asset_identifier=descriptor.asset_identifier,
            ) from e

        logger.info(
            "%s:submit - Job enqueued",
            __name__,
            extra={
                "job_identifier": descriptor.local_identifier,
                "sqs_message_id": response.get("MessageId"),
            },
        )
