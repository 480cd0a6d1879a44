"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List

from mt5_bridge.data.store import MarketDataStore
from mt5_bridge.ingest.pipeline import IngestionPipeline
from mt5_bridge.query import QuerySurface


@pytest.fixture
def store() -> MarketDataStore:
    """Empty market data store."""
    return MarketDataStore()


@pytest.fixture
def pipeline(store: MarketDataStore) -> IngestionPipeline:
    """Ingestion pipeline writing to the shared store fixture."""
    return IngestionPipeline(store)


@pytest.fixture
def query(store: MarketDataStore) -> QuerySurface:
    """Query surface reading the shared store fixture."""
    return QuerySurface(store)


@pytest.fixture
def sample_live_price() -> Dict[str, Any]:
    """Sample live price record as sent by the terminal."""
    return {
        "type": "live_price",
        "symbol": "EURUSD",
        "bid": 1.0841,
        "ask": 1.0843,
        "time": 1700000000,
    }


@pytest.fixture
def sample_candles() -> List[Dict[str, Any]]:
    """Ten M1 candles, oldest first."""
    return [
        {"time": 1700000000 + i * 60, "o": 1.0 + i, "h": 2.0 + i, "l": 0.5 + i, "c": 1.5 + i, "v": 100 + i}
        for i in range(10)
    ]


@pytest.fixture
def sample_ohlcv(sample_candles: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Sample OHLCV batch record."""
    return {
        "type": "ohlcv",
        "symbol": "EURUSD",
        "timeframe": "M1",
        "candles": sample_candles,
    }


@pytest.fixture
def sample_symbol_list() -> Dict[str, Any]:
    """Sample symbol catalog record."""
    return {"type": "symbol_list", "symbols": ["EURUSD", "GBPUSD", "USDJPY"]}
