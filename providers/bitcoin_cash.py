# providers/bitcoin_cash.py
"""
Bitcoin Cash explorer.

Stats come from a details endpoint, transactions from a paginated listing.
Raw transactions are not labelled relative to the queried address, so
direction is found by matching the address against inputs and outputs.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from itertools import chain
from typing import Iterator, Optional

from common.addresses import AddressMatcher
from common.currencies import BITCOIN_CASH
from common.errors import InvalidAddressError
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
from providers.schemas import BchDetails, BchTransactionsPage, BchTx

LOG = logging.getLogger(__name__)


class BitcoinCashFamily(ProviderFamily):
    name = BITCOIN_CASH

    def _cash_address(self, address: Address) -> str:
        try:
            return address.as_cash_address()
        except ValueError as e:
            raise InvalidAddressError(f"{address}: no cash address form ({e})") from e

    def fetch_stats(self, address: Address) -> AddressStats:
        template = self.settings.providers.bitcoin_cash
        cash = self._cash_address(address)

        details = self._get(build_url(template, type="details", address=cash), BchDetails)

        pages = self.iter_pages(build_url(template, type="transactions", address=cash))
        raw = tuple(chain.from_iterable(page.txs for page in pages))

        return AddressStats(
            tx_count=details.txApperances,
            funded_sum=details.totalReceived,
            spent_sum=details.totalSent,
            balance=details.balance,
            raw_transactions=raw,
        )

    def iter_pages(self, url: str) -> Iterator[BchTransactionsPage]:
        """
        Yield transaction pages in order. The page total is re-read from every
        response; a failing page stops the iteration with its error.
        """
        total_pages = 1
        page = 0
        while page < total_pages:
            payload = self._get(f"{url}?page={page}", BchTransactionsPage)
            total_pages = payload.pagesTotal
            LOG.debug("page %d/%d: %d txs", page + 1, total_pages, len(payload.txs))
            yield payload
            page += 1

    def matcher(self, address: Address) -> AddressMatcher:
        cash: Optional[str]
        try:
            cash = address.as_cash_address()
        except ValueError:
            cash = None
        return AddressMatcher.for_bitcoin_cash(str(address), cash)

    def normalize(self, address: Address, stats: AddressStats) -> TransactionHistory:
        matcher = self.matcher(address)
        return TransactionHistory(
            transactions=tuple(self._transaction(tx, matcher) for tx in stats.raw_transactions)
        )

    def _transaction(self, tx: BchTx, matcher: AddressMatcher) -> Transaction:
        ins = []
        outs = []

        # spending: the address funds one of the inputs
        process_out = any(matcher.matches(txin.addr) for txin in tx.vin)

        # receiving: inputs carry no usable value, take it from the matching output
        process_in = False
        amount = Decimal(0)
        for txout in tx.vout:
            if matcher.matches_any(txout.scriptPubKey.addresses):
                amount = txout.value
                process_in = True

        if process_in:
            for txin in tx.vin:
                ins.append(Operation(
                    date=str(tx.time),
                    amount=amount,
                    address=txin.addr,
                    txid=tx.txid,
                    op_type=OperationType.RECEIVED,
                ))

        if process_out:
            for txout in tx.vout:
                if txout.value == 0:
                    continue
                addresses = txout.scriptPubKey.addresses
                outs.append(Operation(
                    date=str(tx.time),
                    amount=txout.value,
                    address=addresses[0] if addresses else None,
                    txid=tx.txid,
                    op_type=OperationType.SENT,
                ))

        return Transaction(
            block_number=tx.blockheight,
            date=format_unix(tx.time),
            txid=tx.txid,
            ins=tuple(ins),
            outs=tuple(outs),
        )
