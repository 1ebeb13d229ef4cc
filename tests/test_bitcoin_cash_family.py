from decimal import Decimal

import pytest
from common.errors import InvalidAddressError, MalformedResponseError, TransportError
from common.models import Address, AddressStats, OperationType
from providers.bitcoin_cash import BitcoinCashFamily
from providers.schemas import BchTx

LEGACY = "1BpEi6DfDAUFd7GtittLSdBeYJvcoaVggu"
CASH = "bitcoincash:qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6a"
DETAILS = f"https://rest.bitcoin.com/v2/address/details/{CASH}"
TXS = f"https://rest.bitcoin.com/v2/address/transactions/{CASH}"

DETAILS_PAYLOAD = {"balance": 0.4, "totalReceived": 1.5, "totalSent": 1.1, "txApperances": 3}


def _tx(txid, vin, vout, time=1600000000, height=600000):
    return {"txid": txid, "blockheight": height, "confirmations": 1, "time": time, "vin": vin, "vout": vout}


def _out(value, *addresses):
    spk = {"addresses": list(addresses)} if addresses else {}
    return {"value": value, "scriptPubKey": spk}


def _family(settings, fetch=None):
    return BitcoinCashFamily(settings("bch"), fetch_json_fn=fetch)


def _normalize(settings, *raw):
    stats = AddressStats(0, Decimal(0), Decimal(0), Decimal(0), tuple(BchTx.model_validate(r) for r in raw))
    return _family(settings).normalize(Address(LEGACY), stats)


def test_pagination_follows_pages_total(settings, fake_fetch):
    fake_fetch.routes[DETAILS] = DETAILS_PAYLOAD
    for i in range(3):
        fake_fetch.routes[f"{TXS}?page={i}"] = {
            "pagesTotal": 3,
            "txs": [_tx(f"p{i}a", [], []), _tx(f"p{i}b", [], [])],
        }
    stats = _family(settings, fake_fetch).fetch_stats(Address(LEGACY))

    assert fake_fetch.calls == [DETAILS, f"{TXS}?page=0", f"{TXS}?page=1", f"{TXS}?page=2"]
    assert [t.txid for t in stats.raw_transactions] == ["p0a", "p0b", "p1a", "p1b", "p2a", "p2b"]
    assert stats.tx_count == 3
    assert stats.funded_sum == Decimal("1.5")
    assert stats.spent_sum == Decimal("1.1")
    assert stats.balance == Decimal("0.4")


def test_single_page_when_total_is_zero(settings, fake_fetch):
    fake_fetch.routes[DETAILS] = DETAILS_PAYLOAD
    fake_fetch.routes[f"{TXS}?page=0"] = {"pagesTotal": 0, "txs": []}
    stats = _family(settings, fake_fetch).fetch_stats(Address(LEGACY))
    assert fake_fetch.calls == [DETAILS, f"{TXS}?page=0"]
    assert stats.raw_transactions == ()


def test_later_page_failure_aborts(settings, fake_fetch):
    fake_fetch.routes[DETAILS] = DETAILS_PAYLOAD
    fake_fetch.routes[f"{TXS}?page=0"] = {"pagesTotal": 2, "txs": [_tx("a", [], [])]}
    with pytest.raises(TransportError):
        _family(settings, fake_fetch).fetch_stats(Address(LEGACY))
    assert fake_fetch.calls[-1] == f"{TXS}?page=1"


def test_supplied_cash_address_is_used(settings, fake_fetch):
    fake_fetch.routes["https://rest.bitcoin.com/v2/address/details/bitcoincash:qmine"] = DETAILS_PAYLOAD
    fake_fetch.routes["https://rest.bitcoin.com/v2/address/transactions/bitcoincash:qmine?page=0"] = {
        "pagesTotal": 1, "txs": []}
    _family(settings, fake_fetch).fetch_stats(Address("anything", cash_address="bitcoincash:qmine"))
    assert len(fake_fetch.calls) == 2


def test_unconvertible_address(settings, fake_fetch):
    with pytest.raises(InvalidAddressError):
        _family(settings, fake_fetch).fetch_stats(Address("not-an-address"))
    assert fake_fetch.calls == []


def test_malformed_details(settings, fake_fetch):
    fake_fetch.routes[DETAILS] = {"balance": 1}
    with pytest.raises(MalformedResponseError):
        _family(settings, fake_fetch).fetch_stats(Address(LEGACY))


def test_incoming_amount_comes_from_matching_output(settings):
    history = _normalize(settings, _tx(
        "in1",
        [{"addr": "1SenderA", "value": 0.7}, {"addr": "1SenderB"}],
        [_out(0.5, CASH), _out(0.19, "bitcoincash:qother")],
    ))
    (tx,) = history.transactions
    assert [op.address for op in tx.ins] == ["1SenderA", "1SenderB"]
    assert all(op.amount == Decimal("0.5") for op in tx.ins)
    assert all(op.op_type is OperationType.RECEIVED for op in tx.ins)
    assert tx.outs == ()
    assert tx.date == "2020-09-13 12:26:40"
    assert tx.block_number == 600000


def test_outgoing_emits_every_nonzero_output(settings):
    history = _normalize(settings, _tx(
        "out1",
        [{"addr": LEGACY}],
        [_out(0.2, "1Dest"), _out(0, "1Dust"), _out(0.1)],
    ))
    (tx,) = history.transactions
    assert tx.ins == ()
    assert [(op.address, op.amount) for op in tx.outs] == [("1Dest", Decimal("0.2")), (None, Decimal("0.1"))]
    assert all(op.op_type is OperationType.SENT for op in tx.outs)


def test_self_spend_produces_both_directions(settings):
    history = _normalize(settings, _tx(
        "self1",
        [{"addr": LEGACY}],
        [_out(0.3, "1Dest"), _out(0.6, CASH.split(":")[1])],
    ))
    (tx,) = history.transactions
    assert [op.amount for op in tx.ins] == [Decimal("0.6")]
    assert [op.amount for op in tx.outs] == [Decimal("0.3"), Decimal("0.6")]


def test_zero_value_output_to_own_address_never_sent(settings):
    history = _normalize(settings, _tx(
        "zero1",
        [{"addr": LEGACY}],
        [_out(0, CASH), _out(0.25, "1Dest")],
    ))
    (tx,) = history.transactions
    assert [op.address for op in tx.outs] == ["1Dest"]


def test_unrelated_transaction_yields_no_operations(settings):
    history = _normalize(settings, _tx("x", [{"addr": "1Someone"}, {}], [_out(1, "1Else")]))
    (tx,) = history.transactions
    assert tx.operations == ()


def test_raw_inputs_keep_only_the_address(settings):
    tx = BchTx.model_validate(_tx("v", [{"addr": "1A", "value": 0.7, "n": 0}], [_out(1, "1B")]))
    assert tx.vin[0].model_dump() == {"addr": "1A"}
