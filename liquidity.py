"""
liquidity.py — On-chain LP burn lookup.
Finds the Raydium v4 pool for a token through the Shyft GraphQL indexer, then
reads the live LP mint supply over Solana RPC to infer how much LP was burned.
"""

import asyncio
import logging
from typing import List, Optional

import aiohttp

from config import DEFAULT_HTTP_TIMEOUT, Settings
from errors import ConfigError, OnChainQueryError
from models import LiquidityPool, MintInfo, as_dict

logger = logging.getLogger(__name__)

SHYFT_GRAPHQL = "https://programs.shyft.to/v0/graphql/?api_key={api_key}"
SHYFT_RPC     = "https://rpc.shyft.to?api_key={api_key}"

LP_BY_TOKEN_QUERY = """
query LpByToken($where: Raydium_LiquidityPoolv4_bool_exp) {
  Raydium_LiquidityPoolv4(where: $where) {
    pubkey
    lpMint
    lpReserve
    baseMint
    quoteMint
  }
}
"""


def get_burn_percentage(lp_reserve: float, actual_supply: float) -> float:
    """
    Share of LP tokens removed from circulation, in percent.

    The pool records its LP reserve at mint time; anything missing from the
    live supply beyond one unit of rounding slack was burned.
    """
    max_lp_supply = max(actual_supply, lp_reserve - 1)
    if max_lp_supply <= 0:
        return 0.0
    burn_amount = max_lp_supply - actual_supply
    return burn_amount / max_lp_supply * 100


class LiquidityEnricher:
    def __init__(self, api_key: str, graphql_url: str = "", rpc_url: str = "",
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        if not api_key:
            raise ConfigError("SHYFT_API_KEY is required for on-chain liquidity lookups")
        self.graphql_url = graphql_url or SHYFT_GRAPHQL.format(api_key=api_key)
        self.rpc_url = rpc_url or SHYFT_RPC.format(api_key=api_key)
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LiquidityEnricher":
        return cls(
            settings.shyft_api_key,
            graphql_url=settings.shyft_graphql_url,
            rpc_url=settings.solana_rpc_url,
            timeout=settings.http_timeout,
        )

    async def enrich(self, session: aiohttp.ClientSession, ca: str) -> Optional[float]:
        """LP burn percentage for the token's first pool, or None when unknown."""
        try:
            pools = await self.query_lp_by_token(session, ca)
            if not pools:
                raise OnChainQueryError("no liquidity pool found")
            pool = pools[0]
            if not pool.lp_mint or pool.lp_reserve is None:
                raise OnChainQueryError(f"pool {pool.pubkey} has no LP mint/reserve")

            mint = await self.get_mint_info(session, pool.lp_mint)
            scale = 10 ** mint.decimals
            reserve = pool.lp_reserve / scale
            supply = mint.supply / scale
        except OnChainQueryError as e:
            logger.warning(f"[LP] burn unavailable for {ca[:8]}...: {e}")
            return None

        burn = get_burn_percentage(reserve, supply)
        logger.info(f"[LP] pool={pool.pubkey} reserve={reserve} supply={supply} burn={burn:.2f}%")
        return burn

    async def query_lp_by_token(self, session: aiohttp.ClientSession, ca: str) -> List[LiquidityPool]:
        # A token can sit on either side of the pair
        variables = {
            "where": {
                "_or": [{"baseMint": {"_eq": ca}}, {"quoteMint": {"_eq": ca}}]
            }
        }
        payload = {"query": LP_BY_TOKEN_QUERY, "variables": variables}
        data = await self._post(session, self.graphql_url, payload, "indexer")

        if data.get("errors"):
            raise OnChainQueryError(f"indexer error: {data['errors']}")
        records = as_dict(data.get("data")).get("Raydium_LiquidityPoolv4") or []
        if not isinstance(records, list):
            raise OnChainQueryError("indexer returned unexpected pool records")
        return [LiquidityPool.from_record(r) for r in records]

    async def get_mint_info(self, session: aiohttp.ClientSession, mint: str) -> MintInfo:
        payload = {
            "jsonrpc": "2.0", "id": 1,
            "method": "getAccountInfo",
            "params": [mint, {"encoding": "jsonParsed"}]
        }
        data = await self._post(session, self.rpc_url, payload, "rpc")

        if data.get("error"):
            raise OnChainQueryError(f"RPC error: {data['error']}")
        value = as_dict(data.get("result")).get("value")
        if not value:
            raise OnChainQueryError(f"mint account {mint} not found")

        # Accounts the RPC cannot parse come back as ["<base64>", "base64"]
        account_data = as_dict(value).get("data")
        if not isinstance(account_data, dict):
            raise OnChainQueryError(f"account {mint} is not a parsed mint")
        info = as_dict(as_dict(account_data.get("parsed")).get("info"))
        try:
            return MintInfo(decimals=int(info["decimals"]), supply=int(info["supply"]))
        except (KeyError, TypeError, ValueError) as e:
            raise OnChainQueryError(f"mint {mint} missing decimals/supply") from e

    async def _post(self, session: aiohttp.ClientSession, url: str, payload: dict, label: str) -> dict:
        try:
            async with session.post(url, json=payload, timeout=self.timeout) as resp:
                if resp.status != 200:
                    raise OnChainQueryError(f"{label} returned HTTP {resp.status}")
                data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise OnChainQueryError(f"{label} request failed: {e!r}") from e
        if not isinstance(data, dict):
            raise OnChainQueryError(f"{label} returned unexpected payload")
        return data
