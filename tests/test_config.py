import logging

from hashledger.config import Settings, get_package_version, get_settings
from hashledger.logging import configure_logging, get_logger


def test_settings_defaults(monkeypatch):
    for name in ("GENESIS_HASH", "LOG_LEVEL", "METRICS_ENABLED", "JSON_INDENT"):
        monkeypatch.delenv(f"HASHLEDGER_{name}", raising=False)
    settings = Settings(_env_file=None)
    assert settings.genesis_hash == "MA=="
    assert settings.log_level == "INFO"
    assert settings.metrics_enabled is False
    assert settings.json_indent is None


def test_env_overrides_init(monkeypatch):
    monkeypatch.setenv("HASHLEDGER_GENESIS_HASH", "MQ==")
    monkeypatch.setenv("HASHLEDGER_METRICS_PORT", "9100")
    settings = Settings(_env_file=None, genesis_hash="Mg==")
    assert settings.genesis_hash == "MQ=="
    assert settings.metrics_port == 9100


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_package_version_is_a_string():
    assert isinstance(get_package_version(), str)


def test_get_logger_adds_single_handler():
    logger = get_logger("hashledger.test_config")
    get_logger("hashledger.test_config")
    assert len(logger.handlers) == 1


def test_configure_logging_sets_level():
    logger = configure_logging("debug")
    assert logger.name == "hashledger"
    assert logger.level == logging.DEBUG
    configure_logging("INFO")
