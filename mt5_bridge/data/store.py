"""
Thread-safe in-memory market data store.

Holds the latest price per symbol, the latest candle snapshot per
(symbol, timeframe) and the symbol catalog. The socket listener writes from
the event loop while HTTP handlers read from worker threads, so each map is
guarded by its own lock and every mutation is a single replace under that
lock. Stored records are immutable and reads hand out copies.

Lookup keys for prices and candle series are normalized to upper case on
write; readers normalize the same way, so ``eurusd`` and ``EURUSD`` resolve
to the same entry. Records keep the symbol exactly as the producer sent it.
"""

import copy
import threading
from typing import Any, Optional

import structlog

from .models import CandleSeries, LivePrice, normalize_symbol

logger = structlog.get_logger(__name__)


class MarketDataStore:
    """Shared mutable market state for one bridge process."""

    def __init__(self):
        self._prices_lock = threading.RLock()
        self._candles_lock = threading.RLock()
        self._catalog_lock = threading.RLock()

        self._live_prices: dict[str, LivePrice] = {}
        self._candles: dict[str, dict[str, CandleSeries]] = {}
        self._catalog: tuple[Any, ...] = ()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_live_price(self, symbol: str, record: LivePrice) -> None:
        """Replace the latest price for a symbol."""
        key = normalize_symbol(symbol)
        with self._prices_lock:
            self._live_prices[key] = record

    def set_candle_series(self, symbol: str, timeframe: str, series: CandleSeries) -> None:
        """Replace the candle snapshot for a (symbol, timeframe)."""
        key = normalize_symbol(symbol)
        with self._candles_lock:
            timeframes = dict(self._candles.get(key, {}))
            timeframes[timeframe] = series
            self._candles[key] = timeframes

    def set_catalog(self, symbols: list[Any]) -> None:
        """Replace the symbol catalog."""
        catalog = tuple(symbols)
        with self._catalog_lock:
            self._catalog = catalog

    def clear(self) -> None:
        """Drop all stored data."""
        with self._prices_lock, self._candles_lock, self._catalog_lock:
            self._live_prices = {}
            self._candles = {}
            self._catalog = ()
        logger.info("Market data store cleared")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_live_price(self, symbol: str) -> Optional[dict[str, Any]]:
        """Latest price record for a symbol, or None."""
        with self._prices_lock:
            record = self._live_prices.get(normalize_symbol(symbol))
        return record.to_dict() if record is not None else None

    def get_all_live_prices(self) -> dict[str, dict[str, Any]]:
        """Latest price record for every symbol, keyed by lookup key."""
        with self._prices_lock:
            snapshot = dict(self._live_prices)
        return {key: record.to_dict() for key, record in snapshot.items()}

    def get_candle_series(self, symbol: str, timeframe: str, limit: int) -> Optional[list[Any]]:
        """
        Most recent ``limit`` candles for a (symbol, timeframe).

        Args:
            symbol: Symbol, any casing
            timeframe: Timeframe identifier, exact match
            limit: Maximum candles to return, taken from the newest end

        Returns:
            Candles ordered oldest to newest, the whole series when it holds
            fewer than ``limit`` entries, or None when nothing is stored
        """
        series = self.get_series(symbol, timeframe)
        if series is None:
            return None
        return series.tail(limit)

    def get_series(self, symbol: str, timeframe: str) -> Optional[CandleSeries]:
        """Stored CandleSeries record for a (symbol, timeframe), or None."""
        with self._candles_lock:
            return self._candles.get(normalize_symbol(symbol), {}).get(timeframe)

    def get_timeframes(self, symbol: str) -> Optional[list[str]]:
        """Timeframes with stored candles for a symbol, in first-seen order, or None."""
        with self._candles_lock:
            timeframes = self._candles.get(normalize_symbol(symbol))
            if timeframes is None:
                return None
            return list(timeframes)

    def get_catalog(self) -> list[Any]:
        """Symbol catalog from the latest valid catalog message."""
        with self._catalog_lock:
            catalog = self._catalog
        return copy.deepcopy(list(catalog))

    def counts(self) -> dict[str, int]:
        """Sizes of the stored maps."""
        with self._prices_lock, self._candles_lock, self._catalog_lock:
            return {
                "symbols": len(self._catalog),
                "prices": len(self._live_prices),
                "candle_symbols": len(self._candles),
                "candle_series": sum(len(tfs) for tfs in self._candles.values()),
            }
