"""
metrics.py — Pure helpers turning raw numbers and timestamps into
human-scale values for the reports.
"""

import math
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from models import PairSnapshot, to_float

NOT_AVAILABLE = "N/A"
SUFFIXES = ["", "K", "M", "B", "T"]


def calculate_age(creation_time: Optional[float], now: Optional[float] = None) -> str:
    """Elapsed time since a unix timestamp, e.g. "1d 5m 3s". Zero parts are omitted."""
    if creation_time is None:
        return NOT_AVAILABLE
    now = time.time() if now is None else now
    elapsed = max(int(now - creation_time), 0)

    days, rem = divmod(elapsed, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    parts = [f"{v}{unit}" for v, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s")) if v > 0]
    return " ".join(parts) or "0s"


def calculate_age_days(created_at_ms: Optional[int], now: Optional[float] = None) -> Optional[int]:
    if created_at_ms is None:
        return None
    now = time.time() if now is None else now
    return max(int((now * 1000 - created_at_ms) // (1000 * 86400)), 0)


def format_large_number(value) -> str:
    """1234567 -> "1.23M". Missing or non-finite input renders as N/A."""
    number = to_float(value)
    if number is None:
        return NOT_AVAILABLE
    if number == 0:
        return "0.00"

    index = int(math.floor(math.log10(abs(number)) / 3))
    index = max(0, min(index, len(SUFFIXES) - 1))
    scaled = number / 10 ** (3 * index)
    # 999_999 would otherwise print as "1000.00K"
    if round(abs(scaled), 2) >= 1000 and index < len(SUFFIXES) - 1:
        index += 1
        scaled = number / 10 ** (3 * index)
    return f"{scaled:.2f}{SUFFIXES[index]}"


def shorten_address(address: Optional[str]) -> str:
    if not address:
        return NOT_AVAILABLE
    if len(address) <= 9:
        return address
    return f"{address[:5]}...{address[-4:]}"


@dataclass
class PairAggregate:
    total_liquidity_usd: float = 0.0
    total_fdv: float = 0.0
    average_price_usd: float = 0.0
    valid_pairs: int = 0


def aggregate_pairs(pairs: Sequence[PairSnapshot]) -> PairAggregate:
    """Sum liquidity/FDV and average the price over pairs that report all three."""
    agg = PairAggregate()
    total_price = 0.0
    for pair in pairs:
        if pair.liquidity_usd is None or pair.fdv is None or pair.price_usd is None:
            continue
        agg.total_liquidity_usd += pair.liquidity_usd
        agg.total_fdv += pair.fdv
        total_price += pair.price_usd
        agg.valid_pairs += 1

    agg.average_price_usd = total_price / agg.valid_pairs if agg.valid_pairs else 0.0
    return agg
