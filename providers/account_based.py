# providers/account_based.py
"""
Account based explorer (Ethereum).

Each txref names the queried account on one side only: tx_input_n == -1
means the account received, tx_output_n == -1 means it sent. Sent refs get
their fee inclusive total from one extra request each.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Iterator

from common.currencies import ACCOUNT_BASED
from common.errors import MalformedResponseError
from common.models import (
    Address,
    AddressStats,
    Operation,
    OperationType,
    Transaction,
    TransactionHistory,
)
from common.units import to_account_unit, to_fixed
from ingestion.fetcher import build_url
from providers.base import ProviderFamily, format_iso
from providers.schemas import AccountSummary, AccountTransaction, TxRef

LOG = logging.getLogger(__name__)

SENTINEL = -1


class AccountBasedFamily(ProviderFamily):
    name = ACCOUNT_BASED

    def fetch_stats(self, address: Address) -> AddressStats:
        template = self.settings.providers.account_based
        summary = self._get(build_url(template, type="addrs", item=address), AccountSummary)

        precision = self.currency.precision
        return AddressStats(
            tx_count=summary.n_tx,
            funded_sum=to_account_unit(summary.total_received, precision),
            spent_sum=to_account_unit(summary.total_sent, precision),
            balance=to_account_unit(summary.balance, precision),
            raw_transactions=tuple(self.with_fees(summary.txrefs)),
        )

    def with_fees(self, txrefs: Iterable[TxRef]) -> Iterator[TxRef]:
        """Attach the fee inclusive total to sent refs, one request per ref, in order."""
        template = self.settings.providers.account_based
        for ref in txrefs:
            if ref.tx_output_n != SENTINEL:
                yield ref
                continue
            LOG.debug("fee lookup for %s", ref.tx_hash)
            tx = self._get(build_url(template, type="txs", item=ref.tx_hash), AccountTransaction)
            yield ref.model_copy(update={"total": tx.total})

    def amount(self, raw: Decimal) -> Decimal:
        value = to_account_unit(raw, self.currency.precision)
        if self.currency.fixed_precision is not None:
            value = to_fixed(value, self.currency.fixed_precision)
        return value

    def normalize(self, address: Address, stats: AddressStats) -> TransactionHistory:
        transactions = []
        funded = []
        sent = []

        for ref in stats.raw_transactions:
            op = self._operation(address, ref)
            if op.is_received:
                funded.append(op)
                ins, outs = (op,), ()
            else:
                sent.append(op)
                ins, outs = (), (op,)
            transactions.append(Transaction(
                block_number=ref.block_height,
                date=format_iso(ref.confirmed),
                txid=op.txid,
                ins=ins,
                outs=outs,
            ))

        return TransactionHistory(
            transactions=tuple(transactions),
            funded_operations=tuple(funded),
            sent_operations=tuple(sent),
        )

    def _operation(self, address: Address, ref: TxRef) -> Operation:
        is_recipient = ref.tx_input_n == SENTINEL
        is_sender = ref.tx_output_n == SENTINEL
        if is_recipient == is_sender:
            # neither side (or both) points at the account: no single direction
            raise MalformedResponseError(
                f"txref {ref.tx_hash}: ambiguous direction "
                f"tx_input_n={ref.tx_input_n} tx_output_n={ref.tx_output_n}"
            )

        if is_sender:
            if ref.total is None:
                raise MalformedResponseError(f"txref {ref.tx_hash}: sent without fetched total")
            raw = ref.total
        else:
            raw = ref.value

        txid = ref.tx_hash if ref.tx_hash.startswith("0x") else "0x" + ref.tx_hash
        return Operation(
            date=ref.confirmed,
            amount=self.amount(raw),
            address=str(address),
            txid=txid,
            op_type=OperationType.SENT if is_sender else OperationType.RECEIVED,
            block_number=ref.block_height,
        )
