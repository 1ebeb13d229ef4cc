import pytest

from common.errors import TransportError
from common.settings import Settings


class FakeFetch:
    """Canned JSON per URL; records every requested URL in order."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url not in self.routes:
            raise TransportError(f"no route for {url}", url=url)
        payload = self.routes[url]
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture
def fake_fetch():
    return FakeFetch()


@pytest.fixture
def settings():
    def make(currency="btc", testnet=False):
        return Settings(currency=currency, testnet=testnet)
    return make
