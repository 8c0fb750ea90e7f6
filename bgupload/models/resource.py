"""
Resource context model.

One unit of uploadable data belonging to a job. The payload is not loaded
when the context is built; read() fetches it on first use and caches it,
so the underlying loader runs at most once per context.

Dependencies: asyncio (stdlib)
System role: Transient handle passed from resource providers to transports
"""

import asyncio
from typing import Awaitable, Callable, Optional

from bgupload.models.common import ResourceKind

PayloadLoader = Callable[[], Awaitable[bytes]]


class ResourceContext:
    """Lazily loaded resource payload with its identifying metadata."""

    def __init__(
        self,
        job_identifier: str,
        asset_identifier: str,
        loader: PayloadLoader,
        resource_kind: Optional[ResourceKind] = None,
        filename: Optional[str] = None,
        byte_size: Optional[int] = None,
    ) -> None:
        """
        Initialize resource context.

        Args:
            job_identifier: Owning job
            asset_identifier: Asset the resource belongs to
            loader: Coroutine function returning the payload bytes
            resource_kind: Kind tag, when known
            filename: Original filename, when known
            byte_size: Size hint from the asset store, when known
        """
        self.job_identifier = job_identifier
        self.asset_identifier = asset_identifier
        self.resource_kind = resource_kind
        self.filename = filename
        self.byte_size = byte_size
        self._loader = loader
        self._payload: Optional[bytes] = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._payload is not None

    async def read(self) -> bytes:
        """
        Return the payload, invoking the loader on first call only.

        Returns:
            bytes: Resource payload
        """
        async with self._lock:
            if self._payload is None:
                self._payload = await self._loader()
            return self._payload

    def __repr__(self) -> str:
        kind = self.resource_kind.value if self.resource_kind else None
        return (
            f"ResourceContext(job={self.job_identifier!r}, asset={self.asset_identifier!r}, "
            f"kind={kind!r}, filename={self.filename!r})"
        )
