"""
HTTP API module exposing the query surface over REST.
"""
from .http import create_app

__all__ = ["create_app"]
