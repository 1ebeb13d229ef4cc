from decimal import Decimal

import pytest
from common.errors import MalformedResponseError, TransportError
from common.models import Address
from etl.pipeline import explore_address, explore_addresses

def _sochain(addr, balance="0.3"):
    return {"data": {
        "total_txs": 1, "received_value": "0.5", "balance": balance,
        "txs": [{"txid": f"t-{addr}", "block_no": 1, "time": 1600000000,
                 "incoming": {"value": "0.5", "inputs": [{"address": "x"}]}}],
    }}

def _url(addr):
    return f"https://sochain.com/api/v2/address/BTC/{addr}"

def test_explore_address_composes_report(settings, fake_fetch):
    fake_fetch.routes[_url("1A")] = _sochain("1A")
    report = explore_address("1A", settings=settings("btc"), fetch_json_fn=fake_fetch)

    assert report.address == Address("1A")
    assert report.currency == "btc"
    assert report.balance == Decimal("0.3")
    assert report.stats.spent_sum == Decimal("0.2")
    assert [t.txid for t in report.transactions] == ["t-1A"]
    assert report.summary() == {
        "address": "1A", "currency": "btc", "balance": "0.3", "tx_count": 1,
        "funded": "0.5", "spent": "0.2", "transactions": 1,
    }

def test_explore_address_propagates_transport_error(settings, fake_fetch):
    with pytest.raises(TransportError):
        explore_address("1A", settings=settings("btc"), fetch_json_fn=fake_fetch)

def test_batch_keeps_going_after_failures(settings, fake_fetch):
    fake_fetch.routes[_url("1A")] = _sochain("1A")
    fake_fetch.routes[_url("1B")] = {"data": {"balance": "1"}}
    fake_fetch.routes[_url("1D")] = _sochain("1D", balance="0.1")

    outcomes = explore_addresses(["1A", "1B", "1C", Address("1D")],
                                 settings=settings("btc"), fetch_json_fn=fake_fetch)

    assert [str(o.address) for o in outcomes] == ["1A", "1B", "1C", "1D"]
    assert [o.ok for o in outcomes] == [True, False, False, True]
    assert isinstance(outcomes[1].error, MalformedResponseError)
    assert isinstance(outcomes[2].error, TransportError)
    assert outcomes[1].report is None
    assert outcomes[3].report.stats.spent_sum == Decimal("0.4")

def test_batch_does_not_swallow_programming_errors(settings):
    def broken(url):
        raise KeyError("boom")
    with pytest.raises(KeyError):
        explore_addresses(["1A"], settings=settings("btc"), fetch_json_fn=broken)

def test_currency_is_re_read_on_every_call(tmp_path, monkeypatch, fake_fetch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EXPLORER_TESTNET", raising=False)
    eth_url = "https://api.blockcypher.com/v1/eth/main/addrs/0xabc"
    fake_fetch.routes[_url("1A")] = _sochain("1A")
    fake_fetch.routes[eth_url] = {"n_tx": 0, "total_received": 0, "total_sent": 0, "balance": 0}

    monkeypatch.setenv("EXPLORER_CURRENCY", "btc")
    assert explore_address("1A", fetch_json_fn=fake_fetch).currency == "btc"

    monkeypatch.setenv("EXPLORER_CURRENCY", "eth")
    assert explore_address("0xabc", fetch_json_fn=fake_fetch).currency == "eth"
    assert fake_fetch.calls == [_url("1A"), eth_url]
