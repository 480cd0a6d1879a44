"""
System failure error classifications.

These exceptions represent failures outside a single message: a broken
producer connection or a configuration the bridge cannot start with.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class TransportError(SystemFailureError):
    """Connection-level failure on a producer socket."""

    def __init__(self, message: str, peer: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.peer = peer


class ConfigurationError(SystemFailureError):
    """Configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
