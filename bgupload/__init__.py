"""
bgupload: deferred, retryable background upload of large binary assets.

Jobs are enqueued by a producer process and executed later, possibly by a
different process, through a pipeline of resource extraction, HTTP upload
and durable per-job state tracking.
"""

__version__ = "0.1.0"
