"""
SQL-backed job state store.

Persists JobState rows through SQLAlchemy async sessions so a worker
process started later sees the state an earlier one recorded. The schema
is created on first use.

Dependencies: sqlalchemy, bgupload.boundary.db
System role: Durable JobStateStore
"""

import asyncio
import logging
from datetime import timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from bgupload.boundary.db.connection import (
    create_all_tables,
    create_engine_for_url,
    get_async_session_factory,
)
from bgupload.boundary.db.CRUD.job_state_crud import job_state_crud
from bgupload.boundary.db.models.job_state_model import JobStateModel, JobStatusKind
from bgupload.boundary.state.store import JobStateStore
from bgupload.models.state import (
    Completed,
    ErrorPayload,
    Failed,
    InProgress,
    JobState,
    Pending,
)

logger = logging.getLogger(__name__)


class SqlJobStateStore(JobStateStore):
    """JobStateStore over any SQLAlchemy async database."""

    def __init__(self, engine: AsyncEngine, create_schema: bool = True) -> None:
        """
        Initialize store.

        Args:
            engine: Async engine for the state database
            create_schema: Create the table on first use if missing
        """
        self._engine = engine
        self._session_factory = get_async_session_factory(engine)
        self._schema_ready = not create_schema
        self._schema_lock = asyncio.Lock()

    @classmethod
    def from_url(cls, database_url: str, **engine_options) -> "SqlJobStateStore":
        """
        Build a store from a database URL.

        Args:
            database_url: SQLAlchemy async URL
            **engine_options: Passed to create_engine_for_url

        Returns:
            SqlJobStateStore: Store with lazy schema creation
        """
        return cls(create_engine_for_url(database_url, **engine_options))

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await create_all_tables(self._engine)
                self._schema_ready = True
                logger.info("%s:_ensure_schema - Job state table ready", __name__)

    async def load_state(self, job_identifier: str) -> Optional[JobState]:
        await self._ensure_schema()
        async with self._session_factory() as session:
            row = await job_state_crud.get(session, job_identifier)
            if row is None:
                return None
            return _to_state(row)

    async def record(self, state: JobState) -> None:
        await self._ensure_schema()
        values = _to_row_values(state)
        async with self._session_factory() as session:
            await job_state_crud.write_state(session, **values)
            await session.commit()

    async def reset(self, job_identifier: str) -> None:
        await self._ensure_schema()
        async with self._session_factory() as session:
            deleted = await job_state_crud.delete(session, job_identifier)
            await session.commit()
        logger.info(
            "%s:reset - Job state cleared",
            __name__,
            extra={"job_identifier": job_identifier, "deleted": deleted},
        )

    async def dispose(self) -> None:
        """Release pooled connections."""
        await self._engine.dispose()


def _to_row_values(state: JobState) -> dict:
    status = state.status
    values = {
        "job_identifier": state.job_identifier,
        "last_updated": state.last_updated,
        "attempt": 0,
        "retry_scheduled": False,
        "error": None,
    }
    if isinstance(status, Pending):
        values["status"] = JobStatusKind.PENDING
    elif isinstance(status, InProgress):
        values["status"] = JobStatusKind.IN_PROGRESS
        values["attempt"] = status.attempt
    elif isinstance(status, Completed):
        values["status"] = JobStatusKind.COMPLETED
    elif isinstance(status, Failed):
        values["status"] = JobStatusKind.FAILED
        values["attempt"] = status.attempt
        values["retry_scheduled"] = status.retry_scheduled
        values["error"] = status.error.model_dump(mode="json")
    else:
        raise TypeError(f"Unknown job status: {status!r}")
    return values


def _to_state(row: JobStateModel) -> JobState:
    if row.status == JobStatusKind.IN_PROGRESS:
        status = InProgress(attempt=max(1, row.attempt))
    elif row.status == JobStatusKind.COMPLETED:
        status = Completed()
    elif row.status == JobStatusKind.FAILED:
        error = row.error or {"error_type": "Unknown", "message": ""}
        status = Failed(
            error=ErrorPayload.model_validate(error),
            attempt=max(1, row.attempt),
            retry_scheduled=row.retry_scheduled,
        )
    else:
        status = Pending()

    last_updated = row.last_updated
    # SQLite drops tzinfo on read
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    return JobState(job_identifier=row.job_identifier, status=status, last_updated=last_updated)
