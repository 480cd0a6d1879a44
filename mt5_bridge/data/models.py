"""
Canonical data models for producer messages and stored market state.

Classified producer messages are represented as a tagged variant: every
result of classification is one of the frozen dataclasses below and carries
a ``kind`` tag. Stored records are immutable; the store replaces them
wholesale and never mutates one in place.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class MessageKind(str, Enum):
    """Wire discriminator values understood by the bridge."""
    LIVE_PRICE = "live_price"
    OHLCV = "ohlcv"
    SYMBOL_LIST = "symbol_list"


class ResultKind(str, Enum):
    """Tags for classification results that are not store updates."""
    UNKNOWN = "unknown"
    IGNORED = "ignored"
    REJECTED = "rejected"


def normalize_symbol(symbol: str) -> str:
    """Normalize a symbol to its store lookup key."""
    return symbol.strip().upper()


@dataclass(frozen=True)
class LivePrice:
    """Latest price record for one symbol."""
    symbol: str                      # As received from the producer
    payload: dict[str, Any]          # Full producer record, opaque to the bridge
    received_at: str                 # ISO-8601 ingestion timestamp

    def to_dict(self) -> dict[str, Any]:
        """Render the record as served to clients."""
        record = copy.deepcopy(self.payload)
        record["receivedAt"] = self.received_at
        return record


@dataclass(frozen=True)
class CandleSeries:
    """Complete candle snapshot for one (symbol, timeframe) from a single batch."""
    symbol: str
    timeframe: str
    candles: tuple[Any, ...]         # Oldest to newest, as received
    received_at: str

    def __len__(self) -> int:
        return len(self.candles)

    def tail(self, limit: int) -> list[Any]:
        """Most recent ``limit`` candles, oldest to newest."""
        if limit <= 0:
            return []
        return copy.deepcopy(list(self.candles[-limit:]))


@dataclass(frozen=True)
class LivePriceUpdate:
    """Validated live price message."""
    symbol: str
    payload: dict[str, Any]
    kind: MessageKind = field(default=MessageKind.LIVE_PRICE, init=False)


@dataclass(frozen=True)
class CandleBatchUpdate:
    """Validated OHLCV batch message. Candle contents are not inspected."""
    symbol: str
    timeframe: str
    candles: tuple[Any, ...]
    kind: MessageKind = field(default=MessageKind.OHLCV, init=False)


@dataclass(frozen=True)
class SymbolCatalogUpdate:
    """Validated symbol list message."""
    symbols: tuple[Any, ...]
    kind: MessageKind = field(default=MessageKind.SYMBOL_LIST, init=False)


@dataclass(frozen=True)
class UnknownMessage:
    """Well-formed record whose ``type`` the bridge does not handle."""
    message_type: Optional[Any]
    kind: ResultKind = field(default=ResultKind.UNKNOWN, init=False)


@dataclass(frozen=True)
class IgnoredMessage:
    """Message dropped silently, e.g. a blank line or a non-list symbol catalog."""
    reason: str
    kind: ResultKind = field(default=ResultKind.IGNORED, init=False)


@dataclass(frozen=True)
class RejectedMessage:
    """Message that failed parsing or validation."""
    reason: str
    raw: str
    kind: ResultKind = field(default=ResultKind.REJECTED, init=False)


StoreUpdate = Union[LivePriceUpdate, CandleBatchUpdate, SymbolCatalogUpdate]

ClassificationResult = Union[
    LivePriceUpdate,
    CandleBatchUpdate,
    SymbolCatalogUpdate,
    UnknownMessage,
    IgnoredMessage,
    RejectedMessage,
]
