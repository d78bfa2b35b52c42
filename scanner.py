"""
scanner.py — Token report pipeline.
Uses Birdeye for security/overview data, DexScreener for pair data and the
Shyft indexer + Solana RPC (see liquidity.py) for LP burn.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

import aiohttp

from config import BIRDEYE_API, DEFAULT_HTTP_TIMEOUT, DEXSCREENER_API, Settings
from errors import ConfigError, MissingDataError, UpstreamFetchError
from liquidity import LiquidityEnricher
from metrics import aggregate_pairs
from models import MarketOverview, PairSnapshot, SecurityProfile
from report import format_pairs_report, format_report

logger = logging.getLogger(__name__)


async def _get_json(session: aiohttp.ClientSession, url: str, label: str,
                    timeout: aiohttp.ClientTimeout, headers: Optional[dict] = None):
    try:
        async with session.get(url, headers=headers, timeout=timeout) as resp:
            if resp.status != 200:
                raise UpstreamFetchError(f"{label} returned HTTP {resp.status}")
            return await resp.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise UpstreamFetchError(f"{label} request failed: {e!r}") from e


# ── Birdeye security + overview ───────────────────────────────────────────────
class TokenFetcher:
    def __init__(self, api_key: str, base_url: str = BIRDEYE_API, timeout: float = DEFAULT_HTTP_TIMEOUT):
        if not api_key:
            raise ConfigError("BIRDEYE_API_KEY is required for token lookups")
        self.base_url = base_url.rstrip("/")
        self.headers = {"X-API-KEY": api_key, "x-chain": "solana"}
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch(self, session: aiohttp.ClientSession, ca: str) -> Tuple[SecurityProfile, MarketOverview]:
        """
        Fetch security and overview data concurrently.

        Either request failing aborts the report with UpstreamFetchError; an
        empty overview aborts with MissingDataError.
        """
        security_url = f"{self.base_url}/defi/token_security?address={ca}"
        overview_url = f"{self.base_url}/defi/token_overview?address={ca}"
        security_raw, overview_raw = await asyncio.gather(
            _get_json(session, security_url, "token_security", self.timeout, self.headers),
            _get_json(session, overview_url, "token_overview", self.timeout, self.headers),
            return_exceptions=True,
        )

        failures = [r for r in (security_raw, overview_raw) if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, UpstreamFetchError):
                raise failure
            logger.error(f"[FETCH] {ca[:8]}...: {failure}")
        if len(failures) == 2:
            raise UpstreamFetchError("security and overview requests both failed")
        if failures:
            raise UpstreamFetchError(f"partial fetch failure: {failures[0]}")

        security_data = security_raw.get("data") if isinstance(security_raw, dict) else None
        overview_data = overview_raw.get("data") if isinstance(overview_raw, dict) else None
        if not overview_data:
            raise MissingDataError(f"no overview data for {ca}")
        if not security_data:
            logger.warning(f"[FETCH] empty security data for {ca[:8]}...")

        return SecurityProfile.from_payload(security_data), MarketOverview.from_payload(overview_data)


# ── DexScreener pairs ─────────────────────────────────────────────────────────
class PairsFetcher:
    def __init__(self, base_url: str = DEXSCREENER_API, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch_pairs(self, session: aiohttp.ClientSession, ca: str) -> List[PairSnapshot]:
        data = await _get_json(session, f"{self.base_url}/tokens/{ca}", "dexscreener", self.timeout)
        pairs = data.get("pairs") if isinstance(data, dict) else None
        if not pairs:
            raise MissingDataError(f"no pairs for {ca}")
        return [PairSnapshot.from_payload(p) for p in pairs]


# ── Main entry ────────────────────────────────────────────────────────────────
class TokenScanner:
    def __init__(self, fetcher: TokenFetcher, enricher: LiquidityEnricher, pairs: Optional[PairsFetcher] = None):
        self.fetcher = fetcher
        self.enricher = enricher
        self.pairs = pairs or PairsFetcher()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenScanner":
        return cls(
            TokenFetcher(settings.birdeye_api_key, settings.birdeye_api_url, settings.http_timeout),
            LiquidityEnricher.from_settings(settings),
            PairsFetcher(settings.dexscreener_api_url, settings.http_timeout),
        )

    async def scan(self, session: aiohttp.ClientSession, ca: str, now: Optional[float] = None) -> str:
        security, overview = await self.fetcher.fetch(session, ca)
        burn = await self.enricher.enrich(session, ca)
        logger.info(f"[SCAN] {ca[:8]}... name={overview.name} burn={burn}")
        return format_report(ca, security, overview, burn, now=now)

    async def scan_pairs(self, session: aiohttp.ClientSession, ca: str, now: Optional[float] = None) -> str:
        pairs = await self.pairs.fetch_pairs(session, ca)
        aggregate = aggregate_pairs(pairs)
        logger.info(f"[SCAN] {ca[:8]}... pairs={len(pairs)} valid={aggregate.valid_pairs}")
        return format_pairs_report(ca, pairs, aggregate, now=now)
