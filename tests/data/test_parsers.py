"""
Tests for producer message classification and validation.
"""

import json
import sys
import pytest
from unittest.mock import patch

from mt5_bridge.data.models import (
    CandleBatchUpdate,
    IgnoredMessage,
    LivePriceUpdate,
    MessageKind,
    RejectedMessage,
    ResultKind,
    SymbolCatalogUpdate,
    UnknownMessage,
)
from mt5_bridge.data.parsers import (
    PARSE_ERROR,
    ClassificationMetrics,
    classify,
    parse_json_payload,
)
from mt5_bridge.errors import MalformedDataError


class TestParseJsonPayload:
    """Test parse_json_payload."""

    def test_parses_object(self):
        assert parse_json_payload('{"type": "x"}') == {"type": "x"}

    def test_invalid_json_raises_malformed(self):
        with pytest.raises(MalformedDataError) as exc_info:
            parse_json_payload("not json")
        assert exc_info.value.raw_data == "not json"
        assert exc_info.value.recoverable is True

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"),
                        reason="interpreter has no integer string conversion limit")
    def test_oversized_integer_raises_malformed(self):
        with pytest.raises(MalformedDataError):
            parse_json_payload('{"bid": ' + "1" * 5000 + "}")

    def test_value_error_from_decoder_raises_malformed(self):
        with patch("mt5_bridge.data.parsers.json.loads", side_effect=ValueError("bad number")):
            with pytest.raises(MalformedDataError):
                parse_json_payload('{"bid": 1}')

    @pytest.mark.parametrize("raw", ["[1, 2]", "42", '"text"', "null"])
    def test_non_object_raises_malformed(self, raw):
        with pytest.raises(MalformedDataError):
            parse_json_payload(raw)


class TestClassifyLivePrice:
    """Test live_price classification."""

    def test_valid_live_price(self, sample_live_price):
        result = classify(json.dumps(sample_live_price))
        assert isinstance(result, LivePriceUpdate)
        assert result.kind == MessageKind.LIVE_PRICE
        assert result.symbol == "EURUSD"
        assert result.payload == sample_live_price

    def test_symbol_kept_as_received(self):
        result = classify('{"type":"live_price","symbol":"eurUSD","bid":1}')
        assert isinstance(result, LivePriceUpdate)
        assert result.symbol == "eurUSD"

    @pytest.mark.parametrize("record", [
        {"type": "live_price", "bid": 1.1},
        {"type": "live_price", "symbol": "", "bid": 1.1},
        {"type": "live_price", "symbol": "   ", "bid": 1.1},
        {"type": "live_price", "symbol": None, "bid": 1.1},
        {"type": "live_price", "symbol": 42, "bid": 1.1},
    ])
    def test_missing_symbol_rejected(self, record):
        raw = json.dumps(record)
        result = classify(raw)
        assert isinstance(result, RejectedMessage)
        assert result.kind == ResultKind.REJECTED
        assert result.reason == "missing symbol"
        assert result.raw == raw


class TestClassifyOhlcv:
    """Test ohlcv classification."""

    def test_valid_batch(self, sample_ohlcv, sample_candles):
        result = classify(json.dumps(sample_ohlcv))
        assert isinstance(result, CandleBatchUpdate)
        assert result.kind == MessageKind.OHLCV
        assert result.symbol == "EURUSD"
        assert result.timeframe == "M1"
        assert list(result.candles) == sample_candles

    def test_empty_candle_list_accepted(self):
        result = classify('{"type":"ohlcv","symbol":"EURUSD","timeframe":"H1","candles":[]}')
        assert isinstance(result, CandleBatchUpdate)
        assert result.candles == ()

    def test_candle_contents_not_validated(self):
        result = classify('{"type":"ohlcv","symbol":"EURUSD","timeframe":"H1","candles":[1,"x",null,{}]}')
        assert isinstance(result, CandleBatchUpdate)
        assert result.candles == (1, "x", None, {})

    def test_missing_symbol_rejected(self):
        result = classify('{"type":"ohlcv","timeframe":"M1","candles":[]}')
        assert isinstance(result, RejectedMessage)
        assert result.reason == "missing symbol"

    def test_missing_timeframe_rejected(self):
        result = classify('{"type":"ohlcv","symbol":"EURUSD","candles":[]}')
        assert isinstance(result, RejectedMessage)
        assert result.reason == "missing timeframe"

    @pytest.mark.parametrize("candles", ["null", '"abc"', "{}", "5"])
    def test_non_list_candles_rejected(self, candles):
        result = classify('{"type":"ohlcv","symbol":"EURUSD","timeframe":"M1","candles":%s}' % candles)
        assert isinstance(result, RejectedMessage)
        assert result.reason == "missing candles"

    def test_absent_candles_rejected(self):
        result = classify('{"type":"ohlcv","symbol":"EURUSD","timeframe":"M1"}')
        assert isinstance(result, RejectedMessage)


class TestClassifySymbolList:
    """Test symbol_list classification."""

    def test_valid_catalog(self, sample_symbol_list):
        result = classify(json.dumps(sample_symbol_list))
        assert isinstance(result, SymbolCatalogUpdate)
        assert result.kind == MessageKind.SYMBOL_LIST
        assert result.symbols == ("EURUSD", "GBPUSD", "USDJPY")

    def test_empty_catalog_accepted(self):
        result = classify('{"type":"symbol_list","symbols":[]}')
        assert isinstance(result, SymbolCatalogUpdate)
        assert result.symbols == ()

    @pytest.mark.parametrize("record", [
        {"type": "symbol_list"},
        {"type": "symbol_list", "symbols": "EURUSD"},
        {"type": "symbol_list", "symbols": {"a": 1}},
    ])
    def test_non_list_symbols_silently_ignored(self, record):
        result = classify(json.dumps(record))
        assert isinstance(result, IgnoredMessage)
        assert result.kind == ResultKind.IGNORED


class TestClassifyOther:
    """Test unknown kinds, blank lines and parse errors."""

    def test_unknown_type(self):
        result = classify('{"type":"account_info","balance":100}')
        assert isinstance(result, UnknownMessage)
        assert result.kind == ResultKind.UNKNOWN
        assert result.message_type == "account_info"

    def test_missing_type_is_unknown(self):
        result = classify('{"symbol":"EURUSD"}')
        assert isinstance(result, UnknownMessage)
        assert result.message_type is None

    def test_unhashable_type_is_unknown(self):
        result = classify('{"type":["live_price"]}')
        assert isinstance(result, UnknownMessage)

    def test_parse_error(self):
        result = classify("not json")
        assert isinstance(result, RejectedMessage)
        assert result.reason == PARSE_ERROR
        assert result.raw == "not json"

    def test_truncated_json_is_parse_error(self):
        result = classify('{"type":"live_price","symbol":"EUR')
        assert isinstance(result, RejectedMessage)
        assert result.reason == PARSE_ERROR

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"),
                        reason="interpreter has no integer string conversion limit")
    def test_oversized_integer_is_parse_error(self):
        raw = '{"type":"live_price","symbol":"EURUSD","bid":' + "1" * 5000 + "}"
        result = classify(raw)
        assert isinstance(result, RejectedMessage)
        assert result.reason == PARSE_ERROR

    def test_non_object_is_parse_error(self):
        result = classify("[1,2,3]")
        assert isinstance(result, RejectedMessage)
        assert result.reason == PARSE_ERROR

    @pytest.mark.parametrize("text", ["", "   ", "\r", "\t "])
    def test_blank_lines_ignored(self, text):
        result = classify(text)
        assert isinstance(result, IgnoredMessage)
        assert result.reason == "blank line"

    def test_carriage_return_terminated_line_parses(self):
        """CRLF producers leave a trailing \\r, which JSON treats as whitespace."""
        result = classify('{"type":"live_price","symbol":"EURUSD"}\r')
        assert isinstance(result, LivePriceUpdate)


class TestClassificationMetrics:
    """Test ClassificationMetrics counters."""

    def test_counts_each_outcome(self):
        metrics = ClassificationMetrics()
        for text in [
            '{"type":"live_price","symbol":"A"}',
            '{"type":"ohlcv","symbol":"A","timeframe":"M1","candles":[]}',
            '{"type":"symbol_list","symbols":[]}',
            '{"type":"other"}',
            "garbage",
            "",
        ]:
            metrics.record(classify(text))

        stats = metrics.get_stats()
        assert stats["total_messages"] == 6
        assert stats["accepted"] == {"live_price": 1, "ohlcv": 1, "symbol_list": 1}
        assert stats["rejected"] == 1
        assert stats["unknown"] == 1
        assert stats["ignored"] == 1
