"""
Utility functions module.

Time Semantics:
- Every accepted update is stamped with wall-clock ingestion time (UTC)
- Timestamps are exposed as ISO-8601 strings with millisecond precision
"""
