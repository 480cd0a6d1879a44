"""
Producer ingestion module.

TCP listener, per-connection lifecycle, and the pipeline that applies
classified messages to the market data store.
"""
