"""
MT5 Bridge - Market data bridge between a trading terminal and HTTP clients

Receives newline-delimited JSON market data from a MetaTrader 5 terminal over
a raw TCP stream, keeps the latest state in memory, and serves it to clients
polling over HTTP.
"""

__version__ = "0.1.0"
__author__ = "MT5 Bridge Team"
