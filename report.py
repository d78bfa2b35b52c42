"""
report.py — Telegram-ready text for token reports and bot replies.
All output uses Telegram's legacy Markdown parse mode.
"""

from typing import Optional, Sequence

from telegram.helpers import escape_markdown

from errors import ValidationError
from metrics import (
    NOT_AVAILABLE, PairAggregate, calculate_age, calculate_age_days,
    format_large_number, shorten_address,
)
from models import MarketOverview, PairSnapshot, SecurityProfile
from validator import MAX_ADDRESS_LENGTH, MIN_ADDRESS_LENGTH

DESCRIPTION_LIMIT = 100

WELCOME_MESSAGE = (
    "👋 *Welcome to SolTokenScannerBot!*\n\n"
    "Send me a Solana token address and I'll reply with a report covering "
    "price, supply, authorities, holders, age and LP burn.\n\n"
    "*Commands:*\n"
    "/scan `<CA>` — Full token report\n"
    "/pairs `<CA>` — Aggregated DexScreener pairs\n"
    "/help — Show this message"
)
GENERIC_ERROR = "❌ Oops! Something went wrong while fetching the token report. Please try again later."
NOT_FOUND = "❌ Oops! Sorry, we couldn't get that token information."


def scanning_message(ca: str) -> str:
    return f"🔍 Valid token address `{shorten_address(ca)}` received. Gathering token data, please hang tight..."


def invalid_address_message(error: ValidationError) -> str:
    return (
        f"❌ That doesn't look like a token address ({error.length} characters received).\n"
        f"Please send a {MIN_ADDRESS_LENGTH}-{MAX_ADDRESS_LENGTH} character address "
        f"made of letters and digits only."
    )


# Escaped text must stay outside *bold*/_italic_ entities; legacy Markdown
# does not accept escapes inside them.
def _md(text: Optional[str], fallback: str = NOT_AVAILABLE) -> str:
    return escape_markdown(text) if text else fallback


def _usd(value: Optional[float]) -> str:
    formatted = format_large_number(value)
    return formatted if formatted == NOT_AVAILABLE else f"${formatted}"


def links_line(ca: str) -> str:
    links = [
        ("Solscan", f"https://solscan.io/token/{ca}"),
        ("Birdeye", f"https://birdeye.so/token/{ca}?chain=solana"),
        ("DexScreener", f"https://dexscreener.com/solana/{ca}"),
        ("Raydium", f"https://raydium.io/swap/?inputMint=sol&outputMint={ca}"),
        ("RugCheck", f"https://rugcheck.xyz/tokens/{ca}"),
    ]
    return " | ".join(f"[{label}]({url})" for label, url in links)


def format_report(ca: str, security: SecurityProfile, overview: MarketOverview,
                  burn_percentage: Optional[float], now: Optional[float] = None) -> str:
    name   = _md(overview.name, "Unknown")
    symbol = _md(overview.symbol, "???")
    price  = f"${overview.price:.10f}" if overview.price is not None else NOT_AVAILABLE

    if not security.present:
        authority_lines = [f"• Authorities: `{NOT_AVAILABLE}`"]
    elif security.is_renounced:
        authority_lines = ["• Ownership: `Renounced` ✅"]
    else:
        owner = shorten_address(security.owner_address)
        authority_lines = [
            f"• Deployer: `{owner}`",
            f"• Mint authority: `{owner}` ⚠️",
        ]

    top10_pct = security.top10_holder_percent
    top10_pct = f"{top10_pct * 100:.2f}%" if top10_pct is not None else NOT_AVAILABLE
    tax = f"{security.tax}%" if security.present else NOT_AVAILABLE
    burn = f"{burn_percentage:.2f}%" if burn_percentage is not None else NOT_AVAILABLE

    description = overview.description[:DESCRIPTION_LIMIT] if overview.description else None

    lines = [
        f"🔍 *TOKEN REPORT*",
        f"📄 {name} (${symbol})",
        f"`{ca}`", f"",
        f"━━━ 💰 MARKET ━━━",
        f"• Price: `{price}`",
        f"• Supply: `{format_large_number(security.total_supply)}`",
        f"• Market cap: `{_usd(overview.market_cap)}`",
        f"• Liquidity: `{_usd(overview.liquidity)}`", f"",
        f"━━━ 🔐 AUTHORITIES ━━━",
        *authority_lines, f"",
        f"━━━ 📊 HOLDERS ━━━",
        f"• Top 10 balance: `{format_large_number(security.top10_holder_balance)}`",
        f"• Top 10 share: `{top10_pct}`",
        f"• Tax: `{tax}`", f"",
        f"━━━ 💧 LIQUIDITY ━━━",
        f"• Age: `{calculate_age(security.creation_time, now)}`",
        f"• LP burned: `{burn}`", f"",
        f"━━━ 📝 DESCRIPTION ━━━",
        f"{_md(description, '_No description available._')}", f"",
        f"━━━ 🔗 LINKS ━━━",
        links_line(ca),
    ]
    return "\n".join(lines)


def format_pairs_report(ca: str, pairs: Sequence[PairSnapshot], aggregate: PairAggregate,
                        now: Optional[float] = None) -> str:
    first = pairs[0] if pairs else PairSnapshot()
    age_days = calculate_age_days(first.pair_created_at, now)
    age = f"{age_days} days" if age_days is not None else NOT_AVAILABLE

    lines = [
        f"🔍 *Aggregated Token Information*",
        f"`{ca}`", f"",
        f"📄 Name: {_md(first.name, 'Unknown')}",
        f"💲 Symbol: {_md(first.symbol, '???')}",
        f"⚖ Age: {age}",
        f"💰 Total FDV: ${aggregate.total_fdv:.2f}",
        f"💰 Total Liquidity: ${aggregate.total_liquidity_usd:.2f}",
        f"📈 Average Price: ${aggregate.average_price_usd:.10f}",
        f"🔗 Pairs counted: {aggregate.valid_pairs}/{len(pairs)}",
    ]
    return "\n".join(lines)
