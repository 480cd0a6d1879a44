"""
Ingestion pipeline coordinator.

Applies classified producer messages to the market data store:
Decoded line → Classification → Ingestion timestamp → Store replace.

Rejected, unknown and ignored messages are logged (or not) and dropped; the
pipeline never raises for bad input, so the connection feeding it keeps
running.
"""

from typing import Optional

from ..data.models import (
    CandleBatchUpdate,
    CandleSeries,
    ClassificationResult,
    LivePrice,
    LivePriceUpdate,
    RejectedMessage,
    StoreUpdate,
    SymbolCatalogUpdate,
    UnknownMessage,
)
from ..data.parsers import ClassificationMetrics, classify
from ..data.store import MarketDataStore
from ..logging.config import get_ingest_logger, log_rejection
from ..utils.time import ingestion_timestamp


class IngestionPipeline:
    """Classifies producer messages and applies accepted updates to the store."""

    def __init__(self, store: MarketDataStore) -> None:
        self.logger = get_ingest_logger(__name__)
        self.store = store
        self.metrics = ClassificationMetrics()

    def process_message(self, message_text: str, peer: Optional[str] = None) -> ClassificationResult:
        """
        Classify one complete message and apply it if accepted.

        Args:
            message_text: One decoded line from the producer
            peer: Remote address of the connection, for logging

        Returns:
            The classification result
        """
        result = classify(message_text)
        self.metrics.record(result)

        if isinstance(result, RejectedMessage):
            log_rejection(self.logger, result.reason, result.raw, peer=peer)
        elif isinstance(result, UnknownMessage):
            self.logger.info("Unknown data type", message_type=result.message_type, peer=peer)
        elif isinstance(result, (LivePriceUpdate, CandleBatchUpdate, SymbolCatalogUpdate)):
            self.apply(result)

        return result

    def process_messages(self, messages: list[str], peer: Optional[str] = None) -> list[ClassificationResult]:
        """Process messages strictly in the given order."""
        return [self.process_message(message, peer=peer) for message in messages]

    def apply(self, update: StoreUpdate, received_at: Optional[str] = None) -> None:
        """
        Stamp an accepted update and replace the matching store entry.

        Args:
            update: Validated store update
            received_at: Explicit ingestion timestamp, defaults to now
        """
        if received_at is None:
            received_at = ingestion_timestamp()

        if isinstance(update, LivePriceUpdate):
            self.store.set_live_price(
                update.symbol,
                LivePrice(symbol=update.symbol, payload=update.payload, received_at=received_at),
            )
            self.logger.debug("Live price updated", symbol=update.symbol)

        elif isinstance(update, CandleBatchUpdate):
            self.store.set_candle_series(
                update.symbol,
                update.timeframe,
                CandleSeries(
                    symbol=update.symbol,
                    timeframe=update.timeframe,
                    candles=update.candles,
                    received_at=received_at,
                ),
            )
            self.logger.info(
                "Received candles",
                symbol=update.symbol,
                timeframe=update.timeframe,
                count=len(update.candles),
            )

        elif isinstance(update, SymbolCatalogUpdate):
            self.store.set_catalog(list(update.symbols))
            self.logger.info("Received symbol list", count=len(update.symbols))

        else:
            raise TypeError(f"Unsupported update type: {type(update).__name__}")
