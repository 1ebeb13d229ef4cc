# common/currencies.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from common.errors import UnsupportedCurrencyError

GENERAL_UTXO = "general_utxo"
BITCOIN_CASH = "bitcoin_cash"
ACCOUNT_BASED = "account_based"


@dataclass(frozen=True)
class Currency:
    symbol: str
    name: str
    family: str
    precision: int
    # number of decimals used when rendering amounts, None keeps upstream precision
    fixed_precision: Optional[int] = None


CURRENCIES: Dict[str, Currency] = {
    "btc": Currency("btc", "Bitcoin", GENERAL_UTXO, 10 ** 8),
    "ltc": Currency("ltc", "Litecoin", GENERAL_UTXO, 10 ** 8),
    "bch": Currency("bch", "Bitcoin Cash", BITCOIN_CASH, 10 ** 8),
    "eth": Currency("eth", "Ethereum", ACCOUNT_BASED, 10 ** 18, fixed_precision=10),
}


def get_currency(symbol: str) -> Currency:
    try:
        return CURRENCIES[(symbol or "").strip().lower()]
    except KeyError:
        raise UnsupportedCurrencyError(f"Unknown currency symbol: {symbol!r}") from None
