"""
Job state ORM model.

Persists the latest status of every upload job so a later worker process
can continue the retry cycle that an earlier one started.

Dependencies: sqlalchemy, bgupload.boundary.db.base
System role: Durable per-job state row
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bgupload.boundary.db.base import Base, TimestampMixin


class JobStatusKind(str, enum.Enum):
    """
    Stored status discriminator.

    PENDING: Job known but never attempted
    IN_PROGRESS: Attempt `attempt` started and has not recorded an outcome
    COMPLETED: All resources uploaded
    FAILED: Attempt `attempt` failed; see error and retry_scheduled
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class JobStateModel(Base, TimestampMixin):
    """
    One row per job identifier; writes overwrite the row.

    Attributes:
        job_identifier: Job local identifier (primary key)
        status: Status discriminator
        attempt: Attempt number for IN_PROGRESS and FAILED, else 0
        retry_scheduled: FAILED only; a retry disposition was returned
        error: FAILED only; serialised ErrorPayload
        last_updated: Time of the state transition (UTC)
    """

    __tablename__ = "upload_job_states"

    job_identifier: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )

    status: Mapped[JobStatusKind] = mapped_column(
        Enum(JobStatusKind, native_enum=False),
        nullable=False,
        default=JobStatusKind.PENDING,
    )

    attempt: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    retry_scheduled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    error: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        doc="ErrorPayload of the failed attempt",
    )

    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
