"""
Resource providers for upload jobs.

Exports: ResourceProvider, StaticResourceProvider, StaticResource,
FilesystemResourceProvider, S3ResourceProvider
"""

from bgupload.boundary.resources.filesystem_provider import FilesystemResourceProvider
from bgupload.boundary.resources.provider import ResourceProvider
from bgupload.boundary.resources.s3_provider import S3ResourceProvider
from bgupload.boundary.resources.static_provider import StaticResource, StaticResourceProvider

__all__ = [
    "ResourceProvider",
    "StaticResource",
    "StaticResourceProvider",
    "FilesystemResourceProvider",
    "S3ResourceProvider",
]
