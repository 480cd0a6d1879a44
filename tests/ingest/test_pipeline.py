"""Tests for the ingestion pipeline coordinator."""

import json
import pytest
from unittest.mock import patch

from mt5_bridge.data.models import (
    CandleBatchUpdate,
    IgnoredMessage,
    LivePriceUpdate,
    RejectedMessage,
    SymbolCatalogUpdate,
    UnknownMessage,
)


class TestProcessMessage:
    """Test IngestionPipeline.process_message."""

    def test_live_price_applied_with_timestamp(self, pipeline, store, sample_live_price):
        with patch("mt5_bridge.ingest.pipeline.ingestion_timestamp",
                   return_value="2024-01-01T12:00:00.000Z"):
            result = pipeline.process_message(json.dumps(sample_live_price))

        assert isinstance(result, LivePriceUpdate)
        record = store.get_live_price("EURUSD")
        assert record["bid"] == sample_live_price["bid"]
        assert record["receivedAt"] == "2024-01-01T12:00:00.000Z"

    def test_candle_batch_applied(self, pipeline, store, sample_ohlcv, sample_candles):
        result = pipeline.process_message(json.dumps(sample_ohlcv))
        assert isinstance(result, CandleBatchUpdate)
        assert store.get_candle_series("EURUSD", "M1", 100) == sample_candles
        assert store.get_series("EURUSD", "M1").received_at.endswith("Z")

    def test_catalog_applied(self, pipeline, store, sample_symbol_list):
        result = pipeline.process_message(json.dumps(sample_symbol_list))
        assert isinstance(result, SymbolCatalogUpdate)
        assert store.get_catalog() == sample_symbol_list["symbols"]

    def test_parse_error_leaves_store_untouched(self, pipeline, store):
        result = pipeline.process_message("not json")
        assert isinstance(result, RejectedMessage)
        assert store.counts()["prices"] == 0

    def test_rejection_is_logged(self, pipeline):
        with patch("mt5_bridge.ingest.pipeline.log_rejection") as mock_log:
            pipeline.process_message('{"type":"live_price","bid":1}', peer="127.0.0.1:5000")

        mock_log.assert_called_once()
        _, reason, raw = mock_log.call_args.args
        assert reason == "missing symbol"
        assert raw == '{"type":"live_price","bid":1}'
        assert mock_log.call_args.kwargs["peer"] == "127.0.0.1:5000"

    def test_unknown_kind_logged_not_rejected(self, pipeline, store):
        with patch.object(pipeline, "logger") as mock_logger:
            result = pipeline.process_message('{"type":"heartbeat"}')

        assert isinstance(result, UnknownMessage)
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["message_type"] == "heartbeat"
        assert store.counts() == {"symbols": 0, "prices": 0, "candle_symbols": 0, "candle_series": 0}

    def test_non_list_catalog_ignored_without_logging(self, pipeline, store):
        store.set_catalog(["EURUSD"])
        with patch("mt5_bridge.ingest.pipeline.log_rejection") as mock_log, \
                patch.object(pipeline, "logger") as mock_logger:
            result = pipeline.process_message('{"type":"symbol_list","symbols":"GBPUSD"}')

        assert isinstance(result, IgnoredMessage)
        mock_log.assert_not_called()
        mock_logger.info.assert_not_called()
        mock_logger.warning.assert_not_called()
        assert store.get_catalog() == ["EURUSD"]

    def test_metrics_track_outcomes(self, pipeline):
        pipeline.process_messages([
            '{"type":"live_price","symbol":"A"}',
            "garbage",
            '{"type":"other"}',
        ])
        stats = pipeline.metrics.get_stats()
        assert stats["total_messages"] == 3
        assert stats["accepted"]["live_price"] == 1
        assert stats["rejected"] == 1
        assert stats["unknown"] == 1


class TestProcessMessages:
    """Test ordered application."""

    def test_messages_applied_in_order(self, pipeline, store):
        pipeline.process_messages([
            '{"type":"live_price","symbol":"EURUSD","bid":1.0}',
            '{"type":"live_price","symbol":"EURUSD","bid":2.0}',
            '{"type":"live_price","symbol":"EURUSD","bid":3.0}',
        ])
        assert store.get_live_price("EURUSD")["bid"] == 3.0

    def test_bad_message_does_not_stop_later_ones(self, pipeline, store):
        results = pipeline.process_messages([
            "{broken",
            '{"type":"live_price","symbol":"EURUSD","bid":1.5}',
        ])
        assert isinstance(results[0], RejectedMessage)
        assert store.get_live_price("EURUSD")["bid"] == 1.5


class TestApply:
    """Test IngestionPipeline.apply."""

    def test_explicit_received_at(self, pipeline, store):
        pipeline.apply(SymbolCatalogUpdate(symbols=("A",)), received_at="x")
        assert store.get_catalog() == ["A"]

    def test_unsupported_update_raises(self, pipeline):
        with pytest.raises(TypeError):
            pipeline.apply(UnknownMessage(message_type="x"))
