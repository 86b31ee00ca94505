"""HTTP price source backed by urllib."""

import socket
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config.defaults import PollingParams, SourceParams
from ..data.models import Sample
from ..data.parsers import parse_history_payload, parse_spot_payload
from ..errors import DataQualityError, PriceSourceError
from .base import PriceSource

USER_AGENT = "tickwatch/0.1"


class HttpPriceSource(PriceSource):
    """
    Spot quotes from a goldprice.org style endpoint and daily bars from an
    investing.com style chart endpoint.
    """

    def __init__(
        self,
        symbol: str,
        source: Optional[SourceParams] = None,
        polling: Optional[PollingParams] = None,
    ):
        super().__init__(symbol)
        self.source = source or SourceParams()
        self.polling = polling or PollingParams()

        self.spot_url = self.source.spot_url.format(
            currency=self.source.currency, symbol=self.symbol
        )
        self.history_url = self.source.history_url.format(
            instrument_id=self.source.instrument_id,
            points=self.polling.history_points,
        )

        parsed = urlparse(self.spot_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid spot URL: {self.spot_url}")

    @classmethod
    def from_config(cls, symbol: str, config: dict[str, Any]) -> "HttpPriceSource":
        return cls(
            symbol,
            source=SourceParams(**config.get('source', {})),
            polling=PollingParams(**config.get('polling', {})),
        )

    @property
    def supports_history(self) -> bool:
        return self.source.instrument_id > 0

    def fetch_spot(self) -> float:
        body = self._get(self.spot_url)
        try:
            return parse_spot_payload(body)
        except DataQualityError:
            self._error_count += 1
            raise

    def fetch_history(self) -> list[Sample]:
        if not self.supports_history:
            self.logger.debug("No history instrument configured, skipping refill")
            return []

        body = self._get(self.history_url)
        try:
            return parse_history_payload(body)
        except DataQualityError:
            self._error_count += 1
            raise

    def _get(self, url: str) -> bytes:
        """GET ``url`` and return the raw body."""
        self._fetch_count += 1

        req = Request(
            url,
            headers={
                'Accept': 'application/json',
                'User-Agent': USER_AGENT,
            },
            method='GET'
        )

        try:
            with urlopen(req, timeout=self.polling.request_timeout_seconds) as response:
                body = response.read()
                self.logger.debug(
                    "Fetched price data",
                    url=url,
                    status=response.status,
                    size=len(body)
                )
                return body

        except HTTPError as e:
            self._error_count += 1
            raise PriceSourceError(
                f"Request failed with status: {e.code}", url=url, status=e.code
            )

        except (URLError, socket.timeout, TimeoutError) as e:
            self._error_count += 1
            raise PriceSourceError(f"Request failed: {e}", url=url)
