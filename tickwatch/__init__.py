"""
tickwatch - Ticker Signal Engine

Tracks a small set of instruments by polling an external price source,
keeps a bounded rolling history per instrument and derives a BUY/SELL/NEUTRAL
signal together with support/resistance levels and a BOS/COC trend state.
"""

__version__ = "0.1.0"
__author__ = "tickwatch Team"
