"""
In-memory resource provider.

Serves resources registered up front. Useful for previews, demos and
tests where no asset store is available.

Dependencies: bgupload.boundary.resources.provider
System role: Non-persistent ResourceProvider
"""

from dataclasses import dataclass
from typing import Optional

from bgupload.boundary.resources.provider import ResourceProvider, select_requested
from bgupload.core.exceptions import AssetNotFound
from bgupload.models.common import ResourceKind
from bgupload.models.configuration import UploadConfiguration
from bgupload.models.job import JobDescriptor
from bgupload.models.resource import ResourceContext


@dataclass(frozen=True)
class StaticResource:
    kind: ResourceKind
    data: bytes
    filename: Optional[str] = None


class StaticResourceProvider(ResourceProvider):
    """Provider backed by a dict of asset identifier -> resources."""

    def __init__(self, assets: Optional[dict[str, list[StaticResource]]] = None) -> None:
        self._assets: dict[str, list[StaticResource]] = dict(assets or {})

    def add_asset(self, asset_identifier: str, resources: list[StaticResource]) -> None:
        self._assets[asset_identifier] = list(resources)

    def remove_asset(self, asset_identifier: str) -> None:
        self._assets.pop(asset_identifier, None)

    async def resources(
        self,
        job: JobDescriptor,
        configuration: UploadConfiguration,
    ) -> list[ResourceContext]:
        stored = self._assets.get(job.asset_identifier)
        if stored is None:
            raise AssetNotFound(job.asset_identifier)

        selected = select_requested(job, [(resource.kind, resource) for resource in stored])
        return [
            ResourceContext(
                job_identifier=job.local_identifier,
                asset_identifier=job.asset_identifier,
                resource_kind=kind,
                filename=resource.filename,
                byte_size=len(resource.data),
                loader=_constant_loader(resource.data),
            )
            for kind, resource in selected
        ]


def _constant_loader(data: bytes):
    async def load() -> bytes:
        return data

    return load
