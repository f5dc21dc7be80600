"""Tests for config schema defaults, loading, saving and env overrides."""

import json
from pathlib import Path

import pytest

from ajaxrpc.config.loader import (
    camel_to_snake,
    convert_keys,
    convert_to_camel,
    get_config_path,
    load_config,
    save_config,
    snake_to_camel,
)
from ajaxrpc.config.schema import Config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("AJAXRPC_SERVER__PORT", "AJAXRPC_SERVER__HOST", "AJAXRPC_LOGGING__LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = Config()
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9001
    assert config.server.rpc_path == "/json"
    assert config.server.index_enabled is True
    assert config.logging.level == "INFO"
    assert config.rpc_url == "http://127.0.0.1:9001/json"


def test_rpc_url_maps_wildcard_to_loopback() -> None:
    config = Config()
    config.server.host = "0.0.0.0"
    config.server.port = 8080
    assert config.rpc_url == "http://127.0.0.1:8080/json"


def test_default_path_is_under_home() -> None:
    assert get_config_path() == Path.home() / ".ajaxrpc" / "config.json"


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.json")
    assert config.server.port == 9001


def test_camel_case_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"server": {"rpcPath": "/api", "indexEnabled": False, "port": 7000}}))
    config = load_config(path)
    assert config.server.rpc_path == "/api"
    assert config.server.index_enabled is False
    assert config.server.port == 7000
    assert config.logging.level == "INFO"


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.server.port = 9100
    config.logging.file_enabled = True
    save_config(config, path)

    raw = json.loads(path.read_text())
    assert raw["server"]["rpcPath"] == "/json"
    assert raw["logging"]["fileEnabled"] is True

    loaded = load_config(path)
    assert loaded.server.port == 9100
    assert loaded.logging.file_enabled is True


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"server": {"port": "abc"}}'])
def test_invalid_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ValueError, match="Failed to load config"):
        load_config(path)


def test_env_applies_without_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("AJAXRPC_SERVER__PORT", "9555")
    monkeypatch.setenv("AJAXRPC_LOGGING__LEVEL", "DEBUG")
    config = load_config(tmp_path / "absent.json")
    assert config.server.port == 9555
    assert config.logging.level == "DEBUG"


def test_file_wins_over_env(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"server": {"port": 7001}}))
    monkeypatch.setenv("AJAXRPC_SERVER__PORT", "9555")
    assert load_config(path).server.port == 7001


def test_key_conversion() -> None:
    assert camel_to_snake("rpcPath") == "rpc_path"
    assert snake_to_camel("cors_origins") == "corsOrigins"
    data = {"server": {"corsOrigins": ["a"], "indexEnabled": True}}
    assert convert_keys(data) == {"server": {"cors_origins": ["a"], "index_enabled": True}}
    assert convert_to_camel(convert_keys(data)) == data
