"""ORM models."""

from bgupload.boundary.db.models.job_state_model import JobStateModel, JobStatusKind

__all__ = ["JobStateModel", "JobStatusKind"]
