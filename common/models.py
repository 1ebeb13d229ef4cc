# common/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from common.addresses import to_cash_address
from common.units import plain_decimal_string


class OperationType(str, Enum):
    RECEIVED = "Received"
    SENT = "Sent"


@dataclass(frozen=True)
class Address:
    value: str
    cash_address: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("address must be a non empty string")

    def __str__(self) -> str:
        return self.value

    def as_cash_address(self) -> str:
        """Alternate encoding required by the Bitcoin Cash provider."""
        if self.cash_address:
            return self.cash_address
        return to_cash_address(self.value)


@dataclass(frozen=True)
class Operation:
    date: str
    amount: Decimal
    address: Optional[str]
    txid: str
    op_type: OperationType
    block_number: Optional[int] = None

    @property
    def is_received(self) -> bool:
        return self.op_type is OperationType.RECEIVED


@dataclass(frozen=True)
class Transaction:
    block_number: Optional[int]
    date: str
    txid: str
    ins: Tuple[Operation, ...] = ()
    outs: Tuple[Operation, ...] = ()

    @property
    def operations(self) -> Tuple[Operation, ...]:
        return self.ins + self.outs


@dataclass(frozen=True)
class AddressStats:
    tx_count: int
    funded_sum: Decimal
    spent_sum: Decimal
    balance: Decimal
    # validated provider records, consumed by the family normalizer
    raw_transactions: Tuple[Any, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class TransactionHistory:
    transactions: Tuple[Transaction, ...] = ()
    funded_operations: Tuple[Operation, ...] = ()
    sent_operations: Tuple[Operation, ...] = ()


@dataclass(frozen=True)
class AddressReport:
    address: Address
    currency: str
    stats: AddressStats
    history: TransactionHistory

    @property
    def balance(self) -> Decimal:
        return self.stats.balance

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self.history.transactions

    def summary(self) -> dict:
        return {
            "address": str(self.address),
            "currency": self.currency,
            "balance": plain_decimal_string(self.stats.balance),
            "tx_count": self.stats.tx_count,
            "funded": plain_decimal_string(self.stats.funded_sum),
            "spent": plain_decimal_string(self.stats.spent_sum),
            "transactions": len(self.history.transactions),
        }
