"""
models.py — Records decoded from upstream JSON payloads.

Every field is optional. Absent or malformed values decode to None so the
report formatter can substitute its sentinels instead of crashing.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional


def to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _int(value: Any) -> Optional[int]:
    number = to_float(value)
    return int(number) if number is not None else None


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _percent_text(number: float) -> str:
    return f"{number:g}"


def _tax(value: Any) -> str:
    # Token-2022 mints report {"newerTransferFee": {"transferFeeBasisPoints": ...}}
    if isinstance(value, dict):
        fee = value.get("newerTransferFee") or value.get("olderTransferFee") or value
        bps = to_float(as_dict(fee).get("transferFeeBasisPoints"))
        return _percent_text(bps / 100) if bps is not None else "0"
    number = to_float(value)
    return _percent_text(number) if number is not None else "0"


@dataclass
class SecurityProfile:
    owner_address: Optional[str] = None
    creation_time: Optional[int] = None
    top10_holder_balance: Optional[float] = None
    top10_holder_percent: Optional[float] = None
    total_supply: Optional[float] = None
    tax: str = "0"
    # False when the security lookup returned no data at all
    present: bool = False

    @property
    def is_renounced(self) -> bool:
        return self.present and self.owner_address is None

    @classmethod
    def from_payload(cls, data: Any) -> "SecurityProfile":
        data = as_dict(data)
        return cls(
            present=bool(data),
            owner_address=_text(data.get("ownerAddress")),
            creation_time=_int(data.get("creationTime")),
            top10_holder_balance=to_float(data.get("top10HolderBalance")),
            top10_holder_percent=to_float(data.get("top10HolderPercent")),
            total_supply=to_float(data.get("totalSupply")),
            tax=_tax(data.get("transferFeeData")),
        )


@dataclass
class MarketOverview:
    symbol: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    liquidity: Optional[float] = None
    price: Optional[float] = None
    market_cap: Optional[float] = None

    @classmethod
    def from_payload(cls, data: Any) -> "MarketOverview":
        data = as_dict(data)
        description = _text(data.get("description")) or _text(as_dict(data.get("extensions")).get("description"))
        market_cap = to_float(data.get("mc"))
        if market_cap is None:
            market_cap = to_float(data.get("marketCap"))
        return cls(
            symbol=_text(data.get("symbol")),
            name=_text(data.get("name")),
            address=_text(data.get("address")),
            description=description,
            liquidity=to_float(data.get("liquidity")),
            price=to_float(data.get("price")),
            market_cap=market_cap,
        )


@dataclass
class LiquidityPool:
    pubkey: Optional[str] = None
    lp_mint: Optional[str] = None
    lp_reserve: Optional[float] = None
    base_mint: Optional[str] = None
    quote_mint: Optional[str] = None

    @classmethod
    def from_record(cls, record: Any) -> "LiquidityPool":
        record = as_dict(record)
        return cls(
            pubkey=_text(record.get("pubkey")),
            lp_mint=_text(record.get("lpMint")),
            lp_reserve=to_float(record.get("lpReserve")),
            base_mint=_text(record.get("baseMint")),
            quote_mint=_text(record.get("quoteMint")),
        )


@dataclass
class MintInfo:
    decimals: int
    supply: int


@dataclass
class PairSnapshot:
    name: Optional[str] = None
    symbol: Optional[str] = None
    pair_created_at: Optional[int] = None  # milliseconds
    liquidity_usd: Optional[float] = None
    fdv: Optional[float] = None
    price_usd: Optional[float] = None

    @classmethod
    def from_payload(cls, pair: Any) -> "PairSnapshot":
        pair = as_dict(pair)
        base = as_dict(pair.get("baseToken"))
        return cls(
            name=_text(base.get("name")),
            symbol=_text(base.get("symbol")),
            pair_created_at=_int(pair.get("pairCreatedAt")),
            liquidity_usd=to_float(as_dict(pair.get("liquidity")).get("usd")),
            fdv=to_float(pair.get("fdv")),
            price_usd=to_float(pair.get("priceUsd")),
        )
