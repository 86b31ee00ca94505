"""
Price source adapters.

Fetch raw spot quotes and daily history over HTTP and hand them to the
payload parsers in :mod:`tickwatch.data.parsers`.
"""

from .base import PriceSource
from .http_source import HttpPriceSource

__all__ = ["HttpPriceSource", "PriceSource"]
