import pytest

from liquidity import LiquidityEnricher
from scanner import PairsFetcher, TokenFetcher, TokenScanner

CA = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
NOW = 1_700_000_000.0


class FakeResponse:
    """Stands in for an aiohttp response used as `async with session.get(...)`."""

    def __init__(self, payload=None, status=200, error=None):
        self.payload = payload
        self.status = status
        self.error = error

    async def json(self):
        return self.payload

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Routes requests by URL fragment and records every call."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def _respond(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        for fragment, response in self.routes.items():
            if fragment in url:
                return response
        return FakeResponse({}, status=404)

    def get(self, url, **kwargs):
        return self._respond("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._respond("POST", url, kwargs)

    def urls(self, method=None):
        return [url for m, url, _ in self.calls if method is None or m == method]


def security_payload(**overrides):
    data = {
        "ownerAddress": None,
        "creationTime": int(NOW) - 90061,
        "top10HolderBalance": 123456789.0,
        "top10HolderPercent": 0.2345,
        "totalSupply": 1_000_000_000,
        "transferFeeData": None,
    }
    data.update(overrides)
    return {"success": True, "data": data}


def overview_payload(**overrides):
    data = {
        "address": CA,
        "symbol": "TEST",
        "name": "Test Token",
        "extensions": {"description": "A token used in tests"},
        "liquidity": 45600.5,
        "price": 0.00001234,
        "mc": 1234567,
    }
    data.update(overrides)
    return {"success": True, "data": data}


def pools_payload(*records):
    return {"data": {"Raydium_LiquidityPoolv4": list(records)}}


def pool_record(lp_reserve=100_000_000_000):
    return {
        "pubkey": "PoolPubkey1111111111111111111111111111111111",
        "lpMint": "LpMint11111111111111111111111111111111111111",
        "lpReserve": lp_reserve,
        "baseMint": CA,
        "quoteMint": "So11111111111111111111111111111111111111112",
    }


def mint_payload(decimals=9, supply="90000000000"):
    return {
        "jsonrpc": "2.0", "id": 1,
        "result": {"value": {"data": {"parsed": {"type": "mint", "info": {"decimals": decimals, "supply": supply}}}}},
    }


def full_routes():
    return {
        "token_security": FakeResponse(security_payload()),
        "token_overview": FakeResponse(overview_payload()),
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse(mint_payload()),
    }


@pytest.fixture
def enricher():
    return LiquidityEnricher("shyft-key", timeout=5)


@pytest.fixture
def fetcher():
    return TokenFetcher("birdeye-key", timeout=5)


@pytest.fixture
def scanner(fetcher, enricher):
    return TokenScanner(fetcher, enricher, PairsFetcher(timeout=5))
