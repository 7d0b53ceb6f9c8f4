"""Unit tests for config.py"""

import pytest

from mdsite.config import load_config


def test_load_config_defaults(monkeypatch):
    """Settings defaults apply when no config.yaml, env var, or CLI override exists."""
    monkeypatch.delenv("MDSITE_CONTENT_ROOT", raising=False)
    monkeypatch.delenv("MDSITE_MODE", raising=False)
    settings = load_config()
    assert settings.content_root == "content/docs"
    assert settings.live


def test_load_config_uses_env_content_root(monkeypatch):
    """MDSITE_CONTENT_ROOT env var is picked up by load_config."""
    monkeypatch.setenv("MDSITE_CONTENT_ROOT", "/srv/docs")
    assert load_config().content_root == "/srv/docs"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDSITE_MODE takes precedence over config.yaml mode."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("mode: live\ncontent_root: docs\n")
    monkeypatch.setenv("MDSITE_MODE", "frozen")
    settings = load_config()
    assert settings.mode == "frozen"
    assert not settings.live
    assert settings.content_root == "docs"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDSITE_CONTENT_ROOT", "/env/docs")
    settings = load_config(overrides={"content_root": "/cli/docs", "port": None})
    assert settings.content_root == "/cli/docs"
    assert settings.port == 8000


def test_load_config_env_coerces_types(monkeypatch):
    """MDSITE_PORT and MDSITE_PERSIST_SNAPSHOT are coerced to int and bool."""
    monkeypatch.setenv("MDSITE_PORT", "9001")
    monkeypatch.setenv("MDSITE_PERSIST_SNAPSHOT", "false")
    settings = load_config()
    assert settings.port == 9001
    assert settings.persist_snapshot is False


def test_load_config_invalid_yaml(tmp_path, monkeypatch):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_invalid_mode(monkeypatch):
    """An unknown mode is reported as a ValueError."""
    monkeypatch.setenv("MDSITE_MODE", "sometimes")
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config()
