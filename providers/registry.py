# providers/registry.py
from __future__ import annotations

from typing import Dict, Optional, Type

from common.currencies import ACCOUNT_BASED, BITCOIN_CASH, GENERAL_UTXO, Currency, get_currency
from common.errors import UnsupportedCurrencyError
from common.settings import Settings
from ingestion.fetcher import FetchJSON
from providers.account_based import AccountBasedFamily
from providers.base import ProviderFamily
from providers.bitcoin_cash import BitcoinCashFamily
from providers.general import GeneralUtxoFamily

FAMILIES: Dict[str, Type[ProviderFamily]] = {
    GENERAL_UTXO: GeneralUtxoFamily,
    BITCOIN_CASH: BitcoinCashFamily,
    ACCOUNT_BASED: AccountBasedFamily,
}


def get_family(
    settings: Settings,
    fetch_json_fn: Optional[FetchJSON] = None,
    currency: Optional[Currency] = None,
) -> ProviderFamily:
    """
    Pick the provider family for the active currency. Looked up on every
    call so a settings change takes effect on the next query.
    """
    cur = currency or get_currency(settings.currency)
    try:
        cls = FAMILIES[cur.family]
    except KeyError:
        raise UnsupportedCurrencyError(
            f"No provider family {cur.family!r} for currency {cur.symbol!r}"
        ) from None
    return cls(settings, fetch_json_fn=fetch_json_fn, currency=cur)
