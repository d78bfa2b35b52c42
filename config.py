"""
config.py — Runtime settings for the token scanner bot.

Settings are read once at startup from the environment (a local .env file is
loaded first with python-dotenv) and passed explicitly to each component.
"""

import os
import logging
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from dotenv import load_dotenv

from errors import ConfigError

logger = logging.getLogger(__name__)

BIRDEYE_API     = "https://public-api.birdeye.so"
DEXSCREENER_API = "https://api.dexscreener.com/latest/dex"

DEFAULT_HTTP_TIMEOUT = 12.0

# field name -> environment variable
ENV_KEYS = {
    "telegram_token":      "TELEGRAM_TOKEN",
    "birdeye_api_key":     "BIRDEYE_API_KEY",
    "shyft_api_key":       "SHYFT_API_KEY",
    "birdeye_api_url":     "BIRDEYE_API_URL",
    "dexscreener_api_url": "DEXSCREENER_API_URL",
    "shyft_graphql_url":   "SHYFT_GRAPHQL_URL",
    "solana_rpc_url":      "SOLANA_RPC_URL",
    "http_timeout":        "HTTP_TIMEOUT",
    "log_level":           "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    telegram_token: str = ""
    birdeye_api_key: str = ""
    shyft_api_key: str = ""
    birdeye_api_url: str = BIRDEYE_API
    dexscreener_api_url: str = DEXSCREENER_API
    shyft_graphql_url: str = ""
    solana_rpc_url: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = env.get(ENV_KEYS[f.name])
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            if f.name == "http_timeout":
                try:
                    timeout = float(raw)
                except ValueError:
                    logger.warning(f"Cannot parse HTTP_TIMEOUT={raw!r}, using {DEFAULT_HTTP_TIMEOUT}s")
                    continue
                if timeout <= 0:
                    logger.warning(f"HTTP_TIMEOUT must be positive, using {DEFAULT_HTTP_TIMEOUT}s")
                    continue
                values[f.name] = timeout
            elif f.name == "log_level":
                if not isinstance(logging.getLevelName(raw.upper()), int):
                    logger.warning(f"Unknown LOG_LEVEL={raw!r}, using INFO")
                    continue
                values[f.name] = raw.upper()
            else:
                values[f.name] = raw
        return cls(**values)

    def require(self, *names: str) -> None:
        """Raise ConfigError naming every listed setting that is empty."""
        missing = [ENV_KEYS[name] for name in names if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    if load_dotenv(env_file):
        logger.info("Loaded environment from .env")
    return Settings.from_env()
