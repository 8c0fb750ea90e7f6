"""
Test suite for JobStateStore implementations.

Runs the same behaviour checks against the in-memory store and the SQL
store over in-memory SQLite, plus SQL-specific row mapping checks.

System role: Verification of durable job state persistence
"""

import asyncio
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from bgupload.boundary.db.CRUD.job_state_crud import job_state_crud
from bgupload.boundary.db.connection import get_async_session_factory
from bgupload.boundary.db.models.job_state_model import JobStatusKind
from bgupload.boundary.state.memory_store import InMemoryJobStateStore
from bgupload.boundary.state.sql_store import SqlJobStateStore
from bgupload.core.processor import JobProcessor
from bgupload.models.state import Completed, ErrorPayload, Failed, InProgress, JobState, Pending


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, sql_engine):
    """Provide each JobStateStore implementation."""
    if request.param == "memory":
        yield InMemoryJobStateStore()
    else:
        yield SqlJobStateStore(sql_engine)


def _failed(attempt: int = 2) -> Failed:
    return Failed(
        error=ErrorPayload(
            error_type="TransportError",
            message="Upload rejected with status 500",
            details={"status_code": 500, "endpoint": "https://uploads.test"},
        ),
        attempt=attempt,
        retry_scheduled=True,
    )


class TestJobStateStoreContract:
    """Test suite shared by every store."""

    @pytest.mark.asyncio
    async def test_missing_state_is_none(self, store) -> None:
        assert await store.load_state("unknown") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [Pending(), InProgress(attempt=4), Completed(), _failed()],
        ids=["pending", "in_progress", "completed", "failed"],
    )
    async def test_record_round_trips_every_status(self, store, status) -> None:
        # Arrange
        state = JobState(
            job_identifier="job-1",
            status=status,
            last_updated=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

        # Act
        await store.record(state)
        loaded = await store.load_state("job-1")

        # Assert
        assert loaded == state

    @pytest.mark.asyncio
    async def test_record_overwrites(self, store) -> None:
        await store.record(JobState(job_identifier="job-1", status=InProgress(attempt=1)))
        await store.record(JobState(job_identifier="job-1", status=Completed()))

        loaded = await store.load_state("job-1")

        assert loaded.status == Completed()

    @pytest.mark.asyncio
    async def test_reset_removes_only_that_job(self, store) -> None:
        # Arrange
        await store.record(JobState(job_identifier="job-a", status=Completed()))
        await store.record(JobState(job_identifier="job-b", status=InProgress(attempt=2)))

        # Act
        await store.reset("job-b")
        await store.reset("never-recorded")

        # Assert
        assert await store.load_state("job-b") is None
        assert (await store.load_state("job-a")).status == Completed()

    @pytest.mark.asyncio
    async def test_concurrent_writes_for_distinct_jobs(self) -> None:
        store = InMemoryJobStateStore()

        await asyncio.gather(
            *(store.record(JobState(job_identifier=f"job-{i}", status=InProgress(attempt=i + 1))) for i in range(10))
        )

        loaded = [await store.load_state(f"job-{i}") for i in range(10)]

        assert [state.status.attempt for state in loaded] == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_processor_retry_cycle_survives_new_processor(
        self, store, job, configuration, resource_provider, failing_transport
    ) -> None:
        """Test a second process invocation continues the attempt count."""
        # Act
        first = await JobProcessor(failing_transport, store, resource_provider).process(job, configuration)
        second = await JobProcessor(failing_transport, store, resource_provider).process(job, configuration)

        # Assert
        assert first.delay == 2
        assert second.delay == 4


class TestSqlJobStateStore:
    """Test suite for SQL row mapping."""

    @pytest.mark.asyncio
    async def test_failed_row_columns(self, sql_engine) -> None:
        # Arrange
        store = SqlJobStateStore(sql_engine)
        await store.record(JobState(job_identifier="job-1", status=_failed(attempt=3)))

        # Act
        async with get_async_session_factory(sql_engine)() as session:
            row = await job_state_crud.get(session, "job-1")

        # Assert
        assert row.status == JobStatusKind.FAILED
        assert row.attempt == 3
        assert row.retry_scheduled is True
        assert row.error["error_type"] == "TransportError"
        assert row.created_at is not None

    @pytest.mark.asyncio
    async def test_schema_created_once_lazily(self, sql_engine) -> None:
        store = SqlJobStateStore(sql_engine)

        await asyncio.gather(store.load_state("a"), store.load_state("b"))

        assert store._schema_ready is True

    @pytest.mark.asyncio
    async def test_file_database_persists_across_stores(self, tmp_path) -> None:
        # Arrange
        url = f"sqlite+aiosqlite:///{tmp_path / 'state.db'}"
        writer = SqlJobStateStore.from_url(url)
        await writer.record(JobState(job_identifier="job-1", status=InProgress(attempt=7)))
        await writer.dispose()

        # Act
        reader = SqlJobStateStore.from_url(url)
        loaded = await reader.load_state("job-1")
        await reader.dispose()

        # Assert
        assert loaded.status == InProgress(attempt=7)
