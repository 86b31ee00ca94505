"""
Error classification for the ticker signal engine.

Data quality problems reject a single sample and are always recoverable.
Registry failures signal programming or wiring mistakes. Price source failures
skip one poll tick.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
)
from .system_failures import (
    SystemFailureError,
    RegistryError,
    DuplicateTickerError,
    UnknownTickerError,
    ConfigurationError,
)
from .recovery import (
    RecoverableError,
    PriceSourceError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # System Failures
    "SystemFailureError",
    "RegistryError",
    "DuplicateTickerError",
    "UnknownTickerError",
    "ConfigurationError",
    # Recovery Categories
    "RecoverableError",
    "PriceSourceError",
]
