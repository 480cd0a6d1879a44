"""
Error classification system for the MT5 bridge.

Data quality errors are recovered locally and never stop ingestion;
system failures describe broken connections or unusable configuration.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
    NotFoundError,
)
from .system_failures import (
    SystemFailureError,
    TransportError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    "NotFoundError",
    # System Failures
    "SystemFailureError",
    "TransportError",
    "ConfigurationError",
]
