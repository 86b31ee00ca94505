"""
Recovery strategy classifications for error handling.

Errors here are expected to clear up on their own; the poller logs them and
waits for the next tick.
"""

from typing import Optional


class RecoverableError(Exception):
    """Mixin for errors that can be recovered from automatically."""

    def __init__(self, message: str):
        super().__init__(message)
        self.recoverable = True


class PriceSourceError(RecoverableError):
    """Price source could not be reached or answered with an error status."""

    def __init__(self, message: str, url: Optional[str] = None,
                 status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status
