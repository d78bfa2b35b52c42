import pytest

from config import BIRDEYE_API, DEFAULT_HTTP_TIMEOUT, Settings, load_settings
from errors import ConfigError


def test_defaults_from_empty_env():
    settings = Settings.from_env({})
    assert settings.birdeye_api_url == BIRDEYE_API
    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert settings.log_level == "INFO"
    assert settings.telegram_token == ""


def test_reads_environment():
    settings = Settings.from_env({
        "TELEGRAM_TOKEN": "tg",
        "BIRDEYE_API_KEY": " be ",
        "SHYFT_API_KEY": "sh",
        "HTTP_TIMEOUT": "3.5",
        "LOG_LEVEL": "debug",
    })
    assert settings.telegram_token == "tg"
    assert settings.birdeye_api_key == "be"
    assert settings.http_timeout == 3.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "0", "-2"])
def test_bad_timeout_falls_back(raw):
    assert Settings.from_env({"HTTP_TIMEOUT": raw}).http_timeout == DEFAULT_HTTP_TIMEOUT


def test_bad_log_level_falls_back():
    assert Settings.from_env({"LOG_LEVEL": "loud"}).log_level == "INFO"


def test_require_names_missing_env_vars():
    settings = Settings(birdeye_api_key="x")
    settings.require("birdeye_api_key")
    with pytest.raises(ConfigError, match="TELEGRAM_TOKEN, SHYFT_API_KEY"):
        settings.require("telegram_token", "birdeye_api_key", "shyft_api_key")


def test_load_settings_reads_env_file(tmp_path, monkeypatch):
    # setenv first so teardown removes what load_dotenv writes
    monkeypatch.setenv("SHYFT_API_KEY", "placeholder")
    monkeypatch.delenv("SHYFT_API_KEY")
    env_file = tmp_path / ".env"
    env_file.write_text("SHYFT_API_KEY=from-file\n")
    assert load_settings(str(env_file)).shyft_api_key == "from-file"
