# providers/base.py
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional, Type

from common.currencies import Currency
from common.errors import MalformedResponseError
from common.models import Address, AddressStats, TransactionHistory
from common.settings import Settings
from ingestion.fetcher import FetchJSON, json_fetcher
from providers.schemas import M, parse_payload

READABLE_FORMAT = "%Y-%m-%d %H:%M:%S"
ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# seconds fraction of any length, e.g. RFC3339Nano ".123456789"
_FRACTION = re.compile(r"(:\d{2})\.(\d+)")


def format_unix(ts: int) -> str:
    """Unix seconds -> 'yyyy-MM-dd HH:mm:ss' (UTC)."""
    try:
        return datetime.fromtimestamp(int(ts), tz=timezone.utc).strftime(READABLE_FORMAT)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedResponseError(f"invalid unix time {ts!r}") from e


def format_iso(value: str) -> str:
    """Provider date/time string -> 'yyyy-MM-ddTHH:mm:ssZ' (UTC)."""
    s = (value or "").strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 digit fractions
    s = _FRACTION.sub(lambda m: m.group(1) + "." + (m.group(2) + "000000")[:6], s, count=1)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as e:
        raise MalformedResponseError(f"invalid date {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(ISO_FORMAT)


class ProviderFamily:
    """
    One upstream explorer shape.

    fetch_stats does all network I/O for an address and returns an immutable
    AddressStats holding the raw transaction cache; normalize is a pure
    transformation of that cache into a TransactionHistory.
    """

    name = ""

    def __init__(
        self,
        settings: Settings,
        fetch_json_fn: Optional[FetchJSON] = None,
        currency: Optional[Currency] = None,
    ) -> None:
        self.settings = settings
        self.currency = currency or settings.active_currency
        self._fetch = fetch_json_fn or json_fetcher(settings.http.timeout)

    def fetch_stats(self, address: Address) -> AddressStats:
        raise NotImplementedError

    def normalize(self, address: Address, stats: AddressStats) -> TransactionHistory:
        raise NotImplementedError

    def _get(self, url: str, model: Type[M]) -> M:
        return parse_payload(model, self._fetch(url), url=url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(currency={self.currency.symbol!r})"
