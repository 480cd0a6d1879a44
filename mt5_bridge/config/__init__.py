"""
Configuration module.

Defaults, YAML overrides and command line overrides for the socket
listener, the HTTP API, the query surface and logging.
"""
from .defaults import BridgeConfig, get_default_config
from .loader import ConfigLoader, load_settings

__all__ = ["BridgeConfig", "ConfigLoader", "get_default_config", "load_settings"]
