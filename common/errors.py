# common/errors.py
from __future__ import annotations

from typing import Optional


class ExplorerError(RuntimeError):
    """Base class for failures while querying one address."""


class TransportError(ExplorerError):
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class MalformedResponseError(ExplorerError):
    """The upstream payload is missing a field or carries an unusable value."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message if url is None else f"{message} url={url}")
        self.url = url


class UnsupportedCurrencyError(ExplorerError):
    pass


class InvalidAddressError(ExplorerError):
    """The queried address cannot be expressed in the form a provider needs."""
