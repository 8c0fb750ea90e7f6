"""
Worker entry points.

Glue between hosted schedulers and the upload extension handler.

Dependencies: bgupload.application
System role: Background job execution
"""
