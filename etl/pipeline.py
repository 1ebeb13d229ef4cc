from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from common.errors import ExplorerError
from common.models import Address, AddressReport
from common.settings import Settings, load_settings
from ingestion.fetcher import FetchJSON
from providers.registry import get_family

LOG = logging.getLogger(__name__)

AddressLike = Union[str, Address]


def get_settings() -> Settings:
    # not cached, each call re-reads config and env
    return load_settings()


def _as_address(address: AddressLike) -> Address:
    return address if isinstance(address, Address) else Address(address)


@dataclass(frozen=True)
class AddressOutcome:
    address: Address
    report: Optional[AddressReport] = None
    error: Optional[ExplorerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def explore_address(
    address: AddressLike,
    settings: Optional[Settings] = None,
    fetch_json_fn: Optional[FetchJSON] = None,
) -> AddressReport:
    """
    Stats first, then normalization of the raw transactions they carry.
    Any failure aborts the whole address; nothing partial is returned.
    """
    st = settings or get_settings()
    addr = _as_address(address)

    family = get_family(st, fetch_json_fn=fetch_json_fn)
    stats = family.fetch_stats(addr)
    history = family.normalize(addr, stats)

    report = AddressReport(address=addr, currency=family.currency.symbol, stats=stats, history=history)
    LOG.info(
        "%s %s balance=%s funded=%s spent=%s txs=%d",
        family.currency.symbol, addr, stats.balance, stats.funded_sum,
        stats.spent_sum, len(history.transactions),
    )
    return report


def explore_addresses(
    addresses: Iterable[AddressLike],
    settings: Optional[Settings] = None,
    fetch_json_fn: Optional[FetchJSON] = None,
) -> List[AddressOutcome]:
    """
    Query addresses one after another. An explorer failure is recorded on
    that address's outcome and the batch moves on.
    """
    st = settings or get_settings()
    out = []
    for a in addresses:
        addr = _as_address(a)
        try:
            report = explore_address(addr, settings=st, fetch_json_fn=fetch_json_fn)
        except ExplorerError as e:
            LOG.warning("%s failed: %s", addr, e)
            out.append(AddressOutcome(address=addr, error=e))
            continue
        out.append(AddressOutcome(address=addr, report=report))
    return out


__all__ = ["AddressOutcome", "explore_address", "explore_addresses", "get_settings"]
