"""
Job state stores.

Exports: JobStateStore, InMemoryJobStateStore, SqlJobStateStore
"""

from bgupload.boundary.state.memory_store import InMemoryJobStateStore
from bgupload.boundary.state.sql_store import SqlJobStateStore
from bgupload.boundary.state.store import JobStateStore

__all__ = ["JobStateStore", "InMemoryJobStateStore", "SqlJobStateStore"]
