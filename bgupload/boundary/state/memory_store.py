"""
In-memory job state store.

Ephemeral store useful for previews and testing. State is lost when the
process exits.

Dependencies: None
System role: Non-durable JobStateStore
"""

from typing import Optional

from bgupload.boundary.state.store import JobStateStore
from bgupload.models.state import JobState


class InMemoryJobStateStore(JobStateStore):
    """Dict-backed store. Each operation completes without suspending."""

    def __init__(self) -> None:
        self._storage: dict[str, JobState] = {}

    async def load_state(self, job_identifier: str) -> Optional[JobState]:
        return self._storage.get(job_identifier)

    async def record(self, state: JobState) -> None:
        self._storage[state.job_identifier] = state

    async def reset(self, job_identifier: str) -> None:
        self._storage.pop(job_identifier, None)

    def __len__(self) -> int:
        return len(self._storage)
