import json

import pytest

from glucosmart.core.settings import get_settings, merge_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    for key in (
        "SERVER_HOST", "SERVER_PORT", "CORS_ORIGINS", "DATA_DIR", "SHARE_BASE_URL", "SHARE_TTL_HOURS", "JOBS_ENABLED",
        "LOG_LEVEL", "ACCESS_LOG",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = get_settings()
    assert settings.server.port == 8000
    assert settings.security.cors_origins == ["*"]
    assert settings.share.ttl_hours == 24
    assert settings.jobs.enabled is True


def test_env_overrides_file(monkeypatch, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"server": {"port": 9000, "host": "127.0.0.1"}, "share": {"public_base_url": "https://file.example"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("CONFIG_PATH", str(config))
    monkeypatch.setenv("SERVER_PORT", "9100")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("JOBS_ENABLED", "false")

    settings = get_settings()
    assert settings.server.port == 9100
    assert settings.server.host == "127.0.0.1"
    assert settings.share.public_base_url == "https://file.example"
    assert settings.security.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.jobs.enabled is False


def test_invalid_config_raises(monkeypatch):
    monkeypatch.setenv("SHARE_TTL_HOURS", "0")
    with pytest.raises(RuntimeError, match="Configuration error"):
        get_settings()


def test_invalid_json_file(monkeypatch, tmp_path):
    config = tmp_path / "config.json"
    config.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(config))
    with pytest.raises(RuntimeError, match="Invalid JSON"):
        get_settings()


def test_merge_settings_prefers_env():
    merged = merge_settings({"server": {"port": 1}}, {"server": {"port": 2, "host": "h"}})
    assert merged["server"] == {"port": 1, "host": "h"}
    assert merged["share"] == {}


def test_logging_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ACCESS_LOG", "false")
    settings = get_settings()
    assert settings.logging.level == "DEBUG"
    assert settings.logging.access_log is False


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError, match="Configuration error"):
        get_settings()
