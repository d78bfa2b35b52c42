import asyncio
import logging
from typing import Optional

import aiohttp
from telegram import Bot, LinkPreviewOptions, Update
from telegram.constants import ChatAction, ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from config import Settings, load_settings
from errors import ConfigError, MissingDataError, UpstreamFetchError, ValidationError
from report import (
    GENERIC_ERROR, NOT_FOUND, WELCOME_MESSAGE, invalid_address_message, scanning_message,
)
from scanner import TokenScanner
from validator import validate_address

logger = logging.getLogger(__name__)


class TelegramChannel:
    """Outbound side of a Telegram chat."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, chat_id: int, body: str, parse_mode: Optional[str] = ParseMode.MARKDOWN):
        await self.bot.send_message(
            chat_id=chat_id,
            text=body,
            parse_mode=parse_mode,
            link_preview_options=LinkPreviewOptions(is_disabled=True),
        )

    async def send_typing(self, chat_id: int):
        await self.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)


async def _announce(channel, chat_id: int, ca: str):
    # Progress notice only; a failed send must not stop the scan.
    try:
        await channel.send_text(chat_id, scanning_message(ca))
        await channel.send_typing(chat_id)
    except TelegramError as e:
        logger.warning(f"[BOT] could not send progress notice to {chat_id}: {e}")


async def _deliver(channel, chat_id: int, body: str):
    try:
        await channel.send_text(chat_id, body)
    except TelegramError as e:
        logger.warning(f"[BOT] Markdown send to {chat_id} failed ({e}), resending as plain text")
        await channel.send_text(chat_id, body, parse_mode=None)


async def _run(channel, chat_id: int, text: str, scan) -> None:
    try:
        ca = validate_address(text).address
    except ValidationError as e:
        logger.debug(f"[BOT] invalid address from {chat_id}: {e}")
        await channel.send_text(chat_id, invalid_address_message(e))
        return

    notice = asyncio.create_task(_announce(channel, chat_id, ca))
    try:
        body = await scan(ca)
    except UpstreamFetchError as e:
        logger.error(f"[BOT] fetch failed for {ca}: {e}")
        body = GENERIC_ERROR
    except MissingDataError as e:
        logger.warning(f"[BOT] no data for {ca}: {e}")
        body = NOT_FOUND
    except Exception:
        logger.exception(f"[BOT] scan error for {ca}")
        body = GENERIC_ERROR

    # the notice must land before the reply
    await notice
    await _deliver(channel, chat_id, body)


async def handle_address(channel, scanner: TokenScanner, session: aiohttp.ClientSession,
                         chat_id: int, text: str, now: Optional[float] = None) -> None:
    """Validate an address message, build its report and send it back."""
    await _run(channel, chat_id, text, lambda ca: scanner.scan(session, ca, now=now))


async def handle_pairs(channel, scanner: TokenScanner, session: aiohttp.ClientSession,
                       chat_id: int, text: str, now: Optional[float] = None) -> None:
    await _run(channel, chat_id, text, lambda ca: scanner.scan_pairs(session, ca, now=now))


# ── Telegram handlers ─────────────────────────────────────────────────────────
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_text(WELCOME_MESSAGE, parse_mode=ParseMode.MARKDOWN)


async def scan_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not context.args:
        await update.effective_message.reply_text("Usage: /scan <contract_address>")
        return
    await handle_address(
        TelegramChannel(context.bot), context.bot_data["scanner"], context.bot_data["http"],
        update.effective_chat.id, context.args[0],
    )


async def pairs_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not context.args:
        await update.effective_message.reply_text("Usage: /pairs <contract_address>")
        return
    await handle_pairs(
        TelegramChannel(context.bot), context.bot_data["scanner"], context.bot_data["http"],
        update.effective_chat.id, context.args[0],
    )


async def message_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await handle_address(
        TelegramChannel(context.bot), context.bot_data["scanner"], context.bot_data["http"],
        update.effective_chat.id, update.effective_message.text,
    )


async def _open_http(app: Application):
    app.bot_data["http"] = aiohttp.ClientSession()


async def _close_http(app: Application):
    session = app.bot_data.pop("http", None)
    if session is not None:
        await session.close()


def build_application(settings: Settings) -> Application:
    settings.require("telegram_token")
    scanner = TokenScanner.from_settings(settings)

    app = (
        Application.builder()
        .token(settings.telegram_token)
        .post_init(_open_http)
        .post_shutdown(_close_http)
        .build()
    )
    app.bot_data["scanner"] = scanner
    app.add_handler(CommandHandler(["start", "help"], start))
    app.add_handler(CommandHandler("scan", scan_cmd))
    app.add_handler(CommandHandler("pairs", pairs_cmd))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, message_handler))
    return app


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        app = build_application(settings)
    except ConfigError as e:
        logger.critical(f"[BOT] {e}")
        raise SystemExit(1) from e

    logger.info("Token scanner bot is running...")
    app.run_polling()


if __name__ == "__main__":
    main()
