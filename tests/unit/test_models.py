"""
Test suite for job, configuration, state and resource models.

System role: Verification of domain model invariants
"""

import asyncio

import pytest
from pydantic import ValidationError

from bgupload.core.exceptions import AssetNotFound, error_payload_for
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobContext, JobDescriptor, JobRequest
from bgupload.models.resource import ResourceContext
from bgupload.models.state import Failed, InProgress, JobState


class TestJobModels:
    """Test suite for JobDescriptor, JobRequest and JobContext."""

    def test_descriptor_dedupes_kinds_preserving_order(self) -> None:
        job = JobDescriptor(
            local_identifier="j",
            asset_identifier="a",
            requested_resource_kinds=["video", "photo", "video"],
        )

        assert job.requested_resource_kinds == (ResourceKind.VIDEO, ResourceKind.PHOTO)

    @pytest.mark.parametrize("kinds", [5, "photo", {"photo": 1}])
    def test_descriptor_rejects_non_sequence_kinds(self, kinds) -> None:
        with pytest.raises(ValidationError):
            JobDescriptor(local_identifier="j", asset_identifier="a", requested_resource_kinds=kinds)

    def test_descriptor_is_immutable(self) -> None:
        job = JobDescriptor(local_identifier="j", asset_identifier="a")

        with pytest.raises(ValidationError):
            job.asset_identifier = "b"

    def test_make_descriptor_snapshots_request(self) -> None:
        """Test later request edits do not leak into the descriptor."""
        # Arrange
        request = JobRequest(
            asset_identifier="a",
            extension_target="t",
            transport_identifier="x",
            user_info={"k": "v"},
        )

        # Act
        first = request.make_descriptor()
        request.user_info["k"] = "changed"
        second = request.make_descriptor()

        # Assert
        assert first.user_info == {"k": "v"}
        assert first.local_identifier != second.local_identifier

    def test_context_rejects_attempt_zero(self) -> None:
        job = JobDescriptor(local_identifier="j", asset_identifier="a")

        with pytest.raises(ValidationError):
            JobContext(job=job, attempt=0)

    def test_unknown_kind_tag_parses_to_none(self) -> None:
        assert ResourceKind.parse("Photo") is ResourceKind.PHOTO
        assert ResourceKind.parse("hologram") is None


class TestUploadConfiguration:
    """Test suite for UploadConfiguration defaults and clamping."""

    @pytest.mark.parametrize("value,expected", [(0, 1), (-5, 1), (1, 1), (8, 8)])
    def test_concurrency_clamped_to_at_least_one(self, value: int, expected: int) -> None:
        config = UploadConfiguration(extension_target="t", maximum_concurrent_uploads=value)

        assert config.maximum_concurrent_uploads == expected

    def test_defaults(self) -> None:
        config = UploadConfiguration(extension_target="t")

        assert config.transport_identifier == "default.transport"
        assert config.allows_cellular_access is True
        assert config.is_user_initiated is False
        assert config.retry_policy.delay(1) == 5


class TestJobState:
    """Test suite for JobState status variants."""

    def test_status_round_trips_through_json(self) -> None:
        # Arrange
        state = JobState(
            job_identifier="j",
            status=Failed(error=error_payload_for(AssetNotFound("a")), attempt=3, retry_scheduled=True),
        )

        # Act
        restored = JobState.model_validate_json(state.model_dump_json())

        # Assert
        assert restored == state
        assert restored.status.error.error_type == "AssetNotFound"
        assert restored.status.error.retryable is False

    def test_in_progress_requires_positive_attempt(self) -> None:
        with pytest.raises(ValidationError):
            InProgress(attempt=0)

    def test_last_updated_is_timezone_aware(self) -> None:
        state = JobState(job_identifier="j", status=InProgress(attempt=1))

        assert state.last_updated.tzinfo is not None


class TestResourceContext:
    """Test suite for lazy payload loading."""

    @pytest.mark.asyncio
    async def test_loader_runs_once_across_concurrent_reads(self) -> None:
        # Arrange
        calls = 0

        async def loader() -> bytes:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0)
            return b"payload"

        resource = ResourceContext(job_identifier="j", asset_identifier="a", loader=loader)

        # Act
        results = await asyncio.gather(resource.read(), resource.read(), resource.read())

        # Assert
        assert results == [b"payload"] * 3
        assert calls == 1
        assert resource.is_loaded

    def test_not_loaded_until_read(self) -> None:
        async def loader() -> bytes:
            raise AssertionError("must not load")

        resource = ResourceContext(job_identifier="j", asset_identifier="a", loader=loader)

        assert resource.is_loaded is False
