"""
Parsers for raw price source payloads.

Two payload shapes are understood:

* spot quotes (goldprice.org style): a JSON list whose first element is a
  comma separated string, ``["<ts>,<price>,..."]``; the price is field 1.
* daily history (investing.com chart style):
  ``{"data": [[ts_ms, open, high, low, close, ...], ...]}``; the close is
  used as the sample price.
"""

import json
from datetime import datetime, timezone
from typing import Any, Union

import structlog

from ..errors import DataQualityError, MalformedDataError, MissingDataError
from .models import Sample
from .validators import validate_price

logger = structlog.get_logger(__name__)

CLOSE_INDEX = 4


def _decode(payload: Union[str, bytes, Any]) -> Any:
    """Decode JSON text, passing already-decoded payloads through."""
    if isinstance(payload, (str, bytes, bytearray)):
        if not payload:
            raise MissingDataError("Empty response body", data_type="payload")
        try:
            return json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedDataError(f"Response is not valid JSON: {e}",
                                     raw_data=str(payload)[:100], expected_format="json")
    return payload


def parse_spot_payload(payload: Union[str, bytes, list]) -> float:
    """
    Extract the current price from a spot quote payload.

    Args:
        payload: Raw response body or decoded JSON list

    Returns:
        Validated price

    Raises:
        MissingDataError: If the payload or its first record is empty
        MalformedDataError: If the record does not carry a numeric price
    """
    data = _decode(payload)

    if not data:
        raise MissingDataError("Invalid or empty response data", data_type="spot_quote")

    if not isinstance(data, list):
        raise MalformedDataError(f"Spot payload must be a list, got {type(data).__name__}",
                                 raw_data=str(data)[:100], expected_format="list[str]")

    record = data[0]
    if not record:
        raise MissingDataError("Spot payload has an empty first record", data_type="spot_quote")

    if not isinstance(record, str):
        raise MalformedDataError(f"Spot record must be a string, got {type(record).__name__}",
                                 raw_data=str(record)[:100], expected_format="ts,price,...")

    fields = record.split(",")
    if len(fields) < 2:
        raise MalformedDataError("Spot record has no price field",
                                 raw_data=record[:100], expected_format="ts,price,...")

    return validate_price(fields[1])


def parse_history_payload(payload: Union[str, bytes, dict]) -> list[Sample]:
    """
    Convert a daily history payload into samples ordered by timestamp.

    Rows that cannot be parsed are skipped and logged; the remaining rows are
    returned.

    Raises:
        MissingDataError: If the payload holds no usable rows
        MalformedDataError: If the payload is not a ``{"data": [...]}`` object
    """
    decoded = _decode(payload)

    if not isinstance(decoded, dict):
        raise MalformedDataError(
            f"History payload must be an object, got {type(decoded).__name__}",
            raw_data=str(decoded)[:100],
            expected_format='{"data": [[ts, o, h, l, c], ...]}'
        )

    rows = decoded.get("data")
    if not isinstance(rows, list):
        raise MissingDataError("No valid historical data available", data_type="history")

    samples = []
    skipped = 0
    for row in rows:
        try:
            samples.append(_parse_history_row(row))
        except DataQualityError:
            skipped += 1

    if skipped:
        logger.warning(
            "Skipped unparseable history rows",
            skipped=skipped,
            parsed=len(samples)
        )

    if not samples:
        raise MissingDataError("History payload contains no usable rows",
                               data_type="history", context={"rows": len(rows), "skipped": skipped})

    samples.sort(key=lambda sample: sample.timestamp)
    return samples


def _parse_history_row(row: Any) -> Sample:
    if not isinstance(row, (list, tuple)) or len(row) <= CLOSE_INDEX:
        raise MalformedDataError("History row must have at least five fields",
                                 raw_data=str(row)[:100], expected_format="[ts, o, h, l, c]")

    raw_ts = row[0]
    if isinstance(raw_ts, bool) or not isinstance(raw_ts, (int, float)):
        raise MalformedDataError("History row timestamp must be epoch milliseconds",
                                 raw_data=str(row)[:100], expected_format="int")

    try:
        timestamp = datetime.fromtimestamp(raw_ts / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedDataError(f"History row timestamp out of range: {e}",
                                 raw_data=str(row)[:100], expected_format="int")

    return Sample(price=validate_price(row[CLOSE_INDEX]), timestamp=timestamp)
