"""
Job state CRUD operations.

Dependencies: sqlalchemy, bgupload.boundary.db.models
System role: Job state persistence operations
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from bgupload.boundary.db.CRUD.base_crud import BaseCRUD
from bgupload.boundary.db.models.job_state_model import JobStateModel, JobStatusKind


class JobStateCRUD(BaseCRUD[JobStateModel]):
    """CRUD operations for JobStateModel."""

    def __init__(self) -> None:
        """Initialize JobStateCRUD with JobStateModel."""
        super().__init__(JobStateModel, "job_identifier")

    async def write_state(
        self,
        session: AsyncSession,
        job_identifier: str,
        status: JobStatusKind,
        last_updated: datetime,
        attempt: int = 0,
        retry_scheduled: bool = False,
        error: dict | None = None,
    ) -> JobStateModel:
        """
        Overwrite the state row of a job.

        Args:
            session: Async database session
            job_identifier: Job identifier
            status: New status discriminator
            last_updated: Transition time
            attempt: Attempt number for IN_PROGRESS/FAILED
            retry_scheduled: FAILED with a retry disposition
            error: Serialised ErrorPayload for FAILED

        Returns:
            JobStateModel: Stored row
        """
        return await self.upsert(
            session,
            job_identifier=job_identifier,
            status=status,
            attempt=attempt,
            retry_scheduled=retry_scheduled,
            error=error,
            last_updated=last_updated,
        )


job_state_crud = JobStateCRUD()
