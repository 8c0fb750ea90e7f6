"""
Job state store interface.

Persists progress for upload jobs so retry decisions can be evaluated
across worker invocations.

Dependencies: bgupload.models.state
System role: Contract for durable job state
"""

from abc import ABC, abstractmethod
from typing import Optional

from bgupload.models.state import JobState


class JobStateStore(ABC):
    """
    Key-value store of JobState keyed by job identifier.

    Calls for different identifiers may run concurrently. Calls for the same
    identifier are sequenced by the caller; the store does not serialise them.
    """

    @abstractmethod
    async def load_state(self, job_identifier: str) -> Optional[JobState]:
        """Return the stored state, or None if the job was never recorded."""
        ...

    @abstractmethod
    async def record(self, state: JobState) -> None:
        """Insert or overwrite the state for state.job_identifier."""
        ...

    @abstractmethod
    async def reset(self, job_identifier: str) -> None:
        """Delete the state so the job looks never attempted."""
        ...
