"""
Data ingestion module.

Frame decoding of the producer byte stream, message classification and
validation, and the shared in-memory market data store.
"""
