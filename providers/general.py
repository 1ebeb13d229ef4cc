# providers/general.py
"""
General UTXO explorers (Bitcoin, Litecoin and their testnets).

The upstream already splits each transaction into an incoming section (the
inputs that funded the address, with one aggregate value) and an outgoing
section (outputs, each with its own value).
"""
from __future__ import annotations

import logging

from common.currencies import GENERAL_UTXO
from common.models import (
    Address,
    AddressStats,
    Operation,
    OperationType,
    Transaction,
    TransactionHistory,
)
from ingestion.fetcher import build_url
from providers.base import ProviderFamily, format_unix
from providers.schemas import SochainAddressResponse, SochainTx

LOG = logging.getLogger(__name__)


class GeneralUtxoFamily(ProviderFamily):
    name = GENERAL_UTXO

    def coin_id(self) -> str:
        # provider expects upper case, testnets are e.g. BTCTEST
        coin = self.currency.symbol.upper()
        if self.settings.testnet:
            coin += "TEST"
        return coin

    def fetch_stats(self, address: Address) -> AddressStats:
        url = build_url(self.settings.providers.general, currency=self.coin_id(), address=address)
        data = self._get(url, SochainAddressResponse).data

        funded = data.received_value
        balance = data.balance
        LOG.debug("%s: %d txs, %d embedded", address, data.total_txs, len(data.txs))
        return AddressStats(
            tx_count=data.total_txs,
            funded_sum=funded,
            spent_sum=funded - balance,
            balance=balance,
            raw_transactions=tuple(data.txs),
        )

    def normalize(self, address: Address, stats: AddressStats) -> TransactionHistory:
        return TransactionHistory(
            transactions=tuple(self._transaction(tx) for tx in stats.raw_transactions)
        )

    def _transaction(self, tx: SochainTx) -> Transaction:
        ins = []
        outs = []

        if tx.incoming is not None:
            # every input carries the aggregate incoming value
            for txin in tx.incoming.inputs:
                ins.append(Operation(
                    date=str(tx.time),
                    amount=tx.incoming.value,
                    address=txin.address,
                    txid=tx.txid,
                    op_type=OperationType.RECEIVED,
                ))

        if tx.outgoing is not None:
            for txout in tx.outgoing.outputs:
                outs.append(Operation(
                    date=str(tx.time),
                    amount=txout.value,
                    address=txout.address,
                    txid=tx.txid,
                    op_type=OperationType.SENT,
                ))

        return Transaction(
            block_number=tx.block_no,
            date=format_unix(tx.time),
            txid=tx.txid,
            ins=tuple(ins),
            outs=tuple(outs),
        )
