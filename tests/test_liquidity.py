import asyncio
import math

import aiohttp
import pytest

from errors import ConfigError, OnChainQueryError
from liquidity import LiquidityEnricher, get_burn_percentage

from conftest import CA, FakeResponse, FakeSession, mint_payload, pool_record, pools_payload


def test_burn_percentage_detects_burn():
    # max(90, 99) = 99, burned = 9
    assert math.isclose(get_burn_percentage(100, 90), 9 / 99 * 100)
    assert round(get_burn_percentage(100, 90), 2) == 9.09


def test_burn_percentage_no_burn():
    assert get_burn_percentage(50, 90) == 0


def test_burn_percentage_empty_pool():
    assert get_burn_percentage(0, 0) == 0.0


def test_requires_api_key():
    with pytest.raises(ConfigError):
        LiquidityEnricher("")


def test_default_urls_embed_api_key():
    enricher = LiquidityEnricher("abc")
    assert enricher.graphql_url.endswith("api_key=abc")
    assert enricher.rpc_url.startswith("https://rpc.shyft.to")


@pytest.mark.asyncio
async def test_enrich_returns_burn_percentage(enricher):
    session = FakeSession({
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse(mint_payload()),
    })
    burn = await enricher.enrich(session, CA)
    assert round(burn, 2) == 9.09

    graphql_call, rpc_call = session.calls
    where = graphql_call[2]["json"]["variables"]["where"]
    assert where == {"_or": [{"baseMint": {"_eq": CA}}, {"quoteMint": {"_eq": CA}}]}
    assert rpc_call[2]["json"]["method"] == "getAccountInfo"
    assert rpc_call[2]["json"]["params"][0] == pool_record()["lpMint"]


@pytest.mark.asyncio
async def test_enrich_uses_first_pool_only(enricher):
    second = dict(pool_record(), lpMint="OtherMint")
    session = FakeSession({
        "graphql": FakeResponse(pools_payload(pool_record(), second)),
        "rpc.shyft.to": FakeResponse(mint_payload()),
    })
    await enricher.enrich(session, CA)
    assert session.calls[1][2]["json"]["params"][0] == pool_record()["lpMint"]


@pytest.mark.asyncio
async def test_enrich_without_pools_is_unknown(enricher):
    session = FakeSession({"graphql": FakeResponse(pools_payload())})
    assert await enricher.enrich(session, CA) is None
    assert len(session.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("routes", [
    {"graphql": FakeResponse(status=500)},
    {"graphql": FakeResponse({"errors": [{"message": "bad query"}]})},
    {"graphql": FakeResponse(error=aiohttp.ClientConnectionError("down"))},
    {"graphql": FakeResponse(error=asyncio.TimeoutError())},
    {
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse({"error": {"code": -32602, "message": "invalid"}}),
    },
    {
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse({"result": {"value": None}}),
    },
    {
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse(mint_payload(decimals=None)),
    },
    {
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse({"result": {"value": {"data": ["", "base64"]}}}),
    },
    {
        "graphql": FakeResponse(pools_payload(pool_record())),
        "rpc.shyft.to": FakeResponse({"result": {"value": {"data": {"parsed": "raw"}}}}),
    },
    {"graphql": FakeResponse({"data": ["not", "a", "dict"]})},
    {"graphql": FakeResponse({"data": {"Raydium_LiquidityPoolv4": {"pubkey": "x"}}})},
])
async def test_enrich_degrades_on_failure(enricher, routes):
    assert await enricher.enrich(FakeSession(routes), CA) is None


@pytest.mark.asyncio
async def test_get_mint_info_raises_for_missing_account(enricher):
    session = FakeSession({"rpc.shyft.to": FakeResponse({"result": {"value": None}})})
    with pytest.raises(OnChainQueryError):
        await enricher.get_mint_info(session, "LpMint")


@pytest.mark.asyncio
async def test_query_lp_by_token_decodes_records(enricher):
    session = FakeSession({"graphql": FakeResponse(pools_payload(pool_record(lp_reserve=42)))})
    pools = await enricher.query_lp_by_token(session, CA)
    assert len(pools) == 1
    assert pools[0].lp_reserve == 42.0
    assert pools[0].base_mint == CA
