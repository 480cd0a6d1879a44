"""Command line entry point: ``python -m mt5_bridge`` or ``mt5-bridge``."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import structlog

from .bridge import MarketDataBridge
from .config.loader import load_settings
from .errors import ConfigurationError
from .logging.config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mt5-bridge",
        description="Bridge MetaTrader 5 market data from a TCP stream to a REST API.",
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing bridge.yaml")
    parser.add_argument("--socket-host", help="Producer socket bind address")
    parser.add_argument("--socket-port", type=int, help="Producer socket port")
    parser.add_argument("--http-host", help="HTTP API bind address")
    parser.add_argument("--http-port", type=int, help="HTTP API port")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--log-json", action="store_true", default=None,
                        help="Emit JSON log lines")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command line flags into configuration overrides."""
    mapping = {
        "socket_host": ("socket", "host"),
        "socket_port": ("socket", "port"),
        "http_host": ("http", "host"),
        "http_port": ("http", "port"),
        "log_level": ("logging", "level"),
        "log_json": ("logging", "format_json"),
    }

    overrides: dict[str, Any] = {}
    for attr, (section, key) in mapping.items():
        value = getattr(args, attr)
        if value is not None:
            overrides.setdefault(section, {})[key] = value
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_settings(args.config_dir, overrides_from_args(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(level=config.logging.level, format_json=config.logging.format_json)
    logger = structlog.get_logger("mt5_bridge")

    bridge = MarketDataBridge(config)
    try:
        asyncio.run(bridge.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
