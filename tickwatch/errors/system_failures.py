"""
System failure error classifications.

These represent wiring mistakes (e.g. registering a symbol twice) rather than
bad market data, and are not retried.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class RegistryError(SystemFailureError):
    """Ticker registry lookup or registration failure."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol


class DuplicateTickerError(RegistryError):
    """A ticker with the same symbol is already registered."""


class UnknownTickerError(RegistryError):
    """No ticker is registered under the requested symbol."""


class ConfigurationError(SystemFailureError):
    """Merged configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
