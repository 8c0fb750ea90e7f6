"""CRUD operations for ORM models."""

from bgupload.boundary.db.CRUD.base_crud import BaseCRUD
from bgupload.boundary.db.CRUD.job_state_crud import JobStateCRUD, job_state_crud

__all__ = ["BaseCRUD", "JobStateCRUD", "job_state_crud"]
