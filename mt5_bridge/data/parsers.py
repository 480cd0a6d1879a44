"""
Producer message parsing and classification.

This module turns one decoded line into a classification result: a
validated store update for the three known record kinds, or a structured
unknown/ignored/rejected outcome. Classification never raises for bad
input, so a malformed line can never take down the connection that
carried it.

Wire format:
    {"type": "live_price", "symbol": "EURUSD", "bid": 1.1, "ask": 1.2, ...}
    {"type": "ohlcv", "symbol": "EURUSD", "timeframe": "M1", "candles": [...]}
    {"type": "symbol_list", "symbols": ["EURUSD", "GBPUSD"]}
"""

import json
import threading
from typing import Any

from ..errors import MalformedDataError, MissingDataError
from .models import (
    CandleBatchUpdate,
    ClassificationResult,
    IgnoredMessage,
    LivePriceUpdate,
    MessageKind,
    RejectedMessage,
    ResultKind,
    SymbolCatalogUpdate,
    UnknownMessage,
)

PARSE_ERROR = "parse error"


class ClassificationMetrics:
    """Counters for classification outcomes."""

    def __init__(self):
        self._lock = threading.Lock()
        self.total_messages = 0
        self.accepted = {kind.value: 0 for kind in MessageKind}
        self.rejected = 0
        self.unknown = 0
        self.ignored = 0

    def record(self, result: ClassificationResult) -> None:
        """Record the outcome of one classification."""
        with self._lock:
            self.total_messages += 1
            if result.kind == ResultKind.REJECTED:
                self.rejected += 1
            elif result.kind == ResultKind.UNKNOWN:
                self.unknown += 1
            elif result.kind == ResultKind.IGNORED:
                self.ignored += 1
            else:
                self.accepted[result.kind.value] += 1

    def get_stats(self) -> dict[str, Any]:
        """Get current metrics."""
        with self._lock:
            return {
                "total_messages": self.total_messages,
                "accepted": dict(self.accepted),
                "rejected": self.rejected,
                "unknown": self.unknown,
                "ignored": self.ignored,
            }


def parse_json_payload(raw_data: str) -> dict[str, Any]:
    """
    Parse a raw message into a JSON object.

    Args:
        raw_data: One decoded producer line

    Returns:
        Parsed dictionary

    Raises:
        MalformedDataError: If the text is not JSON or not a JSON object
    """
    try:
        payload = json.loads(raw_data)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and the int digit limit are both ValueError
        raise MalformedDataError(f"Invalid JSON: {e}", raw_data=raw_data[:100],
                                 expected_format="json object")

    if not isinstance(payload, dict):
        raise MalformedDataError(
            f"Expected a JSON object, got {type(payload).__name__}",
            raw_data=raw_data[:100],
            expected_format="json object",
        )

    return payload


def _require_text(payload: dict[str, Any], field_name: str) -> str:
    """Return a required non-empty string field or raise MissingDataError."""
    value = payload.get(field_name)
    if not isinstance(value, str) or not value.strip():
        raise MissingDataError(f"missing {field_name}", data_type=field_name)
    return value


def _parse_live_price(payload: dict[str, Any]) -> LivePriceUpdate:
    symbol = _require_text(payload, "symbol")
    return LivePriceUpdate(symbol=symbol, payload=payload)


def _parse_ohlcv(payload: dict[str, Any]) -> CandleBatchUpdate:
    symbol = _require_text(payload, "symbol")
    timeframe = _require_text(payload, "timeframe")

    candles = payload.get("candles")
    if not isinstance(candles, list):
        raise MissingDataError("missing candles", data_type="candles")

    return CandleBatchUpdate(symbol=symbol, timeframe=timeframe, candles=tuple(candles))


def classify(message_text: str) -> ClassificationResult:
    """
    Parse and validate one producer message.

    Args:
        message_text: One complete line, without its newline

    Returns:
        A store update for known, valid records; otherwise an
        UnknownMessage, IgnoredMessage or RejectedMessage
    """
    if not message_text.strip():
        return IgnoredMessage(reason="blank line")

    try:
        payload = parse_json_payload(message_text)
    except MalformedDataError:
        return RejectedMessage(reason=PARSE_ERROR, raw=message_text)

    message_type = payload.get("type")

    try:
        if message_type == MessageKind.LIVE_PRICE.value:
            return _parse_live_price(payload)

        if message_type == MessageKind.OHLCV.value:
            return _parse_ohlcv(payload)

        if message_type == MessageKind.SYMBOL_LIST.value:
            symbols = payload.get("symbols")
            if not isinstance(symbols, list):
                return IgnoredMessage(reason="symbols is not a list")
            return SymbolCatalogUpdate(symbols=tuple(symbols))

    except MissingDataError as e:
        return RejectedMessage(reason=str(e), raw=message_text)

    return UnknownMessage(message_type=message_type)
