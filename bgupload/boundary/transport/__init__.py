"""
Upload transports.

Dependencies: httpx
System role: Wire layer sending one resource payload per call
"""

from bgupload.boundary.transport.base import Transport
from bgupload.boundary.transport.http_transport import HttpUploadTransport

__all__ = ["Transport", "HttpUploadTransport"]
