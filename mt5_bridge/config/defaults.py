"""Default configuration parameters for the MT5 bridge."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SocketParams:
    """Producer socket listener parameters."""
    host: str = "0.0.0.0"
    port: int = 8308
    read_size: int = 65536             # Max bytes per read from a connection


@dataclass(frozen=True)
class HttpParams:
    """HTTP query API parameters."""
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass(frozen=True)
class QueryParams:
    """Query surface parameters."""
    default_candle_limit: int = 100    # Candles returned when no limit given
    default_requested_bars: int = 100  # Bars reported for OHLCV requests


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class BridgeConfig:
    """Complete bridge configuration."""
    socket: SocketParams
    http: HttpParams
    query: QueryParams
    logging: LoggingParams


def get_default_config() -> BridgeConfig:
    """Get the default configuration instance."""
    return BridgeConfig(
        socket=SocketParams(),
        http=HttpParams(),
        query=QueryParams(),
        logging=LoggingParams(),
    )
