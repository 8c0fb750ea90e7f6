"""
Boundary layer for external system integrations.

Adapters for the job state database, asset stores, the HTTP upload
endpoint and the job queue.
"""
