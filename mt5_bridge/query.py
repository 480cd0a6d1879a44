"""
Read-side query surface over the market data store.

Every accessor returns a plain JSON-ready dictionary. Absent data raises
NotFoundError and incomplete requests raise MissingDataError; the HTTP
layer maps these onto 404 and 400 responses.
"""

from typing import Any, Callable, Optional

import structlog

from .config.defaults import QueryParams
from .data.models import normalize_symbol
from .data.store import MarketDataStore
from .errors import MissingDataError, NotFoundError
from .utils.time import ingestion_timestamp

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Symbol and timeframe are required"


class QuerySurface:
    """Read accessors and the OHLCV request acknowledgment."""

    def __init__(
        self,
        store: MarketDataStore,
        params: Optional[QueryParams] = None,
        listener_running: Optional[Callable[[], bool]] = None
    ) -> None:
        self.store = store
        self.params = params or QueryParams()
        self._listener_running = listener_running

    def health(self) -> dict[str, Any]:
        """Liveness summary."""
        counts = self.store.counts()
        return {
            "status": "ok",
            "timestamp": ingestion_timestamp(),
            "socketServerRunning": (
                self._listener_running() if self._listener_running is not None else False
            ),
            "symbolCount": counts["symbols"],
            "priceCount": counts["prices"],
        }

    def list_symbols(self) -> dict[str, Any]:
        symbols = self.store.get_catalog()
        return {"count": len(symbols), "symbols": symbols}

    def get_price(self, symbol: str) -> dict[str, Any]:
        """Latest price record for a symbol, case-insensitive."""
        key = normalize_symbol(symbol)
        record = self.store.get_live_price(key)
        if record is None:
            raise NotFoundError(f"No price data available for {key}", resource="price")
        return record

    def get_all_prices(self) -> dict[str, Any]:
        prices = self.store.get_all_live_prices()
        return {"count": len(prices), "prices": prices}

    def get_candles(self, symbol: str, timeframe: str, limit: Optional[int] = None) -> dict[str, Any]:
        """
        Most recent candles for a symbol and timeframe.

        Args:
            symbol: Symbol, case-insensitive
            timeframe: Timeframe identifier, case-sensitive
            limit: Maximum candles; missing or non-positive values use the
                configured default

        Raises:
            NotFoundError: If no candles are stored for the pair
        """
        key = normalize_symbol(symbol)
        if not limit or limit <= 0:
            limit = self.params.default_candle_limit

        candles = self.store.get_candle_series(key, timeframe, limit)
        if candles is None:
            raise NotFoundError(
                f"No OHLCV data available for {key} on {timeframe} timeframe",
                resource="ohlcv",
            )

        return {
            "symbol": key,
            "timeframe": timeframe,
            "count": len(candles),
            "candles": candles,
        }

    def get_timeframes(self, symbol: str) -> dict[str, Any]:
        key = normalize_symbol(symbol)
        timeframes = self.store.get_timeframes(key)
        if timeframes is None:
            raise NotFoundError(f"No data available for {key}", resource="timeframes")
        return {"symbol": key, "timeframes": timeframes}

    def acknowledge_request(
        self,
        symbol: Optional[str],
        timeframe: Optional[str],
        bars: Optional[int] = None
    ) -> dict[str, Any]:
        """
        Acknowledge a request for OHLCV data.

        Nothing is stored and nothing is forwarded to the terminal; the data
        becomes available whenever the producer next sends it.

        Raises:
            MissingDataError: If symbol or timeframe is missing
        """
        if not symbol or not timeframe:
            raise MissingDataError(REQUIRED_FIELDS_MESSAGE, data_type="request")

        requested_bars = bars or self.params.default_requested_bars
        logger.info(
            "OHLCV data requested",
            symbol=symbol,
            timeframe=timeframe,
            bars=requested_bars,
        )

        return {
            "status": "requested",
            "message": (
                f"Requested {symbol} {timeframe} data. "
                "It will be available when MT5 sends it."
            ),
            "symbol": symbol,
            "timeframe": timeframe,
            "requestedBars": requested_bars,
        }
