"""
Data quality error classifications for producer messages and queries.

These exceptions categorize problems that are recovered locally: the
offending message or request is dropped and the bridge keeps serving.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """A field required for the record kind is missing or empty."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedDataError(DataQualityError):
    """Data exists but is not a well-formed structured record."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class NotFoundError(DataQualityError):
    """Requested symbol or timeframe has no data in the store."""

    def __init__(self, message: str, resource: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.resource = resource
