"""
Filesystem resource provider.

Reads resources from a local asset library laid out as
<root>/<asset_identifier>/<kind>/<filename>. Directory listing and stat
calls run in worker threads; file contents are read only when a transport
asks for them.

Dependencies: asyncio, pathlib (stdlib)
System role: ResourceProvider for local or mounted asset libraries
"""

import asyncio
import logging
from pathlib import Path

from bgupload.boundary.resources.provider import (
    ResourceProvider,
    gather_bounded,
    parse_layout,
    select_requested,
)
from bgupload.core.exceptions import AssetNotFound
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor
from bgupload.models.resource import ResourceContext

logger = logging.getLogger(__name__)


class FilesystemResourceProvider(ResourceProvider):
    """Provider over a directory tree of assets."""

    def __init__(self, root_directory: str | Path) -> None:
        """
        Initialize provider.

        Args:
            root_directory: Library root containing one directory per asset
        """
        self._root = Path(root_directory)

    def _asset_directory(self, asset_identifier: str) -> Path:
        if not asset_identifier or "/" in asset_identifier or "\\" in asset_identifier:
            raise AssetNotFound(asset_identifier, {"reason": "invalid identifier"})
        if asset_identifier in (".", ".."):
            raise AssetNotFound(asset_identifier, {"reason": "invalid identifier"})
        return self._root / asset_identifier

    def _list_files(self, asset_dir: Path) -> list[tuple[ResourceKind, Path]]:
        if not asset_dir.is_dir():
            raise AssetNotFound(asset_dir.name, {"root": str(self._root)})

        found: list[tuple[ResourceKind, Path]] = []
        for path in sorted(asset_dir.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(asset_dir).as_posix()
            parsed = parse_layout(relative)
            if parsed is None:
                logger.warning(
                    "%s:_list_files - Skipping file outside <kind>/<filename> layout",
                    __name__,
                    extra={"asset_path": relative},
                )
                continue
            found.append((parsed[0], path))
        return found

    async def resources(
        self,
        job: JobDescriptor,
        configuration: UploadConfiguration,
    ) -> list[ResourceContext]:
        asset_dir = self._asset_directory(job.asset_identifier)
        candidates = await asyncio.to_thread(self._list_files, asset_dir)
        selected = select_requested(job, candidates)

        def extract(kind: ResourceKind, path: Path):
            async def run() -> ResourceContext:
                size = (await asyncio.to_thread(path.stat)).st_size
                return ResourceContext(
                    job_identifier=job.local_identifier,
                    asset_identifier=job.asset_identifier,
                    resource_kind=kind,
                    filename=path.name,
                    byte_size=size,
                    loader=lambda: asyncio.to_thread(path.read_bytes),
                )

            return run

        contexts = await gather_bounded(
            configuration.maximum_concurrent_uploads,
            [extract(kind, path) for kind, path in selected],
        )
        logger.info(
            "%s:resources - Extracted resources",
            __name__,
            extra={"job_identifier": job.local_identifier, "resource_count": len(contexts)},
        )
        return contexts
