"""
Validation of raw price samples before they reach a ticker.

Everything here either returns a clean value or raises a DataQualityError
subclass; nothing is mutated.
"""

import math
from datetime import datetime, timezone
from typing import Any

from ..errors import MalformedDataError, MissingDataError


def validate_price(raw_price: Any) -> float:
    """
    Convert a raw price into a positive finite float.

    Args:
        raw_price: Number or numeric string from the price source

    Returns:
        The price as float

    Raises:
        MissingDataError: If the price is absent or an empty string
        MalformedDataError: If the price is not numeric, not finite or not positive
    """
    if raw_price is None:
        raise MissingDataError("Price is missing", data_type="price")

    if isinstance(raw_price, bool):
        raise MalformedDataError("Price must be numeric, got bool",
                                 raw_data=str(raw_price), expected_format="float")

    if isinstance(raw_price, str):
        if not raw_price.strip():
            raise MissingDataError("Price is an empty string", data_type="price")
        try:
            price = float(raw_price.strip())
        except ValueError:
            raise MalformedDataError(f"Price is not numeric: {raw_price[:50]!r}",
                                     raw_data=raw_price[:100], expected_format="float")
    elif isinstance(raw_price, (int, float)):
        price = float(raw_price)
    else:
        raise MalformedDataError(f"Price must be numeric, got {type(raw_price).__name__}",
                                 raw_data=str(raw_price)[:100], expected_format="float")

    if not math.isfinite(price):
        raise MalformedDataError(f"Price is not finite: {price}",
                                 raw_data=str(raw_price)[:100], expected_format="float")

    if price <= 0:
        raise MalformedDataError(f"Price must be positive, got {price}",
                                 raw_data=str(raw_price)[:100], expected_format="float")

    return price


def validate_timestamp(raw_timestamp: Any) -> datetime:
    """
    Check a sample timestamp.

    Naive datetimes are taken to be UTC so that every stored timestamp is
    timezone-aware and comparable.

    Raises:
        MissingDataError: If the timestamp is absent
        MalformedDataError: If the timestamp is not a datetime
    """
    if raw_timestamp is None:
        raise MissingDataError("Timestamp is missing", data_type="timestamp")

    if not isinstance(raw_timestamp, datetime):
        raise MalformedDataError(
            f"Timestamp must be a datetime, got {type(raw_timestamp).__name__}",
            raw_data=str(raw_timestamp)[:100],
            expected_format="datetime"
        )

    if raw_timestamp.tzinfo is None:
        return raw_timestamp.replace(tzinfo=timezone.utc)

    return raw_timestamp
