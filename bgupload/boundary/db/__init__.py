"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - create_engine_for_url(), get_async_session_factory(), create_all_tables(): Connection management
  - JobStateModel, JobStatusKind: Persistent job state
  - job_state_crud: CRUD operation singleton

Dependencies: sqlalchemy
System role: Database adapter providing durable per-job state
"""

from bgupload.boundary.db.base import Base, TimestampMixin
from bgupload.boundary.db.connection import (
    create_all_tables,
    create_engine_for_url,
    get_async_session_factory,
)
from bgupload.boundary.db.models.job_state_model import JobStateModel, JobStatusKind
from bgupload.boundary.db.CRUD import BaseCRUD, JobStateCRUD, job_state_crud

__all__ = [
    "Base",
    "TimestampMixin",
    "create_engine_for_url",
    "get_async_session_factory",
    "create_all_tables",
    "JobStateModel",
    "JobStatusKind",
    "BaseCRUD",
    "JobStateCRUD",
    "job_state_crud",
]
