"""Tests for configuration loading."""

import pytest

from benkyo_core.config import load_config, resolve_store_path


@pytest.fixture(autouse=True)
def _no_store_path_env(monkeypatch):
    monkeypatch.delenv("BENKYO_STORE_PATH", raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["store"] == "json"
    assert config["store_path"] is None
    assert config["daily_goal"] == 20
    assert config["kana_mode"] == "hiragana"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("store: sqlite\ndaily_goal: 50\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "sqlite"
    assert config["daily_goal"] == 50


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("")
    assert load_config(config_path=str(cfg))["store"] == "json"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("kana_mode: katakana\n")
    config = load_config(config_path=str(cfg), cli_overrides={"kana_mode": "both"})
    assert config["kana_mode"] == "both"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("kana_mode: katakana\n")
    config = load_config(config_path=str(cfg), cli_overrides={"kana_mode": None})
    assert config["kana_mode"] == "katakana"


def test_store_path_env_var_wins(tmp_path, monkeypatch):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("store_path: from-file.json\n")
    monkeypatch.setenv("BENKYO_STORE_PATH", "/data/benkyo.json")
    config = load_config(config_path=str(cfg))
    assert config["store_path"] == "/data/benkyo.json"


def test_unknown_store_backend_raises(tmp_path):
    cfg = tmp_path / ".benkyo.yml"
    cfg.write_text("store: gist\n")
    with pytest.raises(ValueError, match="store backend"):
        load_config(config_path=str(cfg))


def test_unknown_kana_mode_raises(tmp_path):
    with pytest.raises(ValueError, match="kana mode"):
        load_config(config_path=str(tmp_path / "none.yml"), cli_overrides={"kana_mode": "romaji"})


def test_resolve_store_path_defaults_per_backend():
    assert resolve_store_path({"store": "json", "store_path": None}) == ".benkyo.json"
    assert resolve_store_path({"store": "sqlite", "store_path": None}) == ".benkyo.db"
    assert resolve_store_path({"store": "memory", "store_path": None}) is None


def test_resolve_store_path_prefers_configured_path():
    assert resolve_store_path({"store": "sqlite", "store_path": "study.db"}) == "study.db"
