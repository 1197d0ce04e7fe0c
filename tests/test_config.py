"""Tests for config.yaml loading."""

from __future__ import annotations

import os

from knxframe import DEFAULTS, load_config


def _write(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_defaults_for_empty_file(tmp_path, monkeypatch):
    monkeypatch.delenv("KNXFRAME_API_PORT", raising=False)
    config = load_config(_write(tmp_path, ""))
    assert config == DEFAULTS
    assert config["gateway"]["port"] == 3671


def test_partial_sections_merge_with_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("KNXFRAME_API_PORT", raising=False)
    config = load_config(
        _write(tmp_path, "gateway:\n  host: 10.0.0.1\nmonitor:\n  max_size: 50\n")
    )
    assert config["gateway"] == {"host": "10.0.0.1", "port": 3671}
    assert config["monitor"]["max_size"] == 50
    assert config["api"]["port"] == 9090


def test_env_overrides_api_port(tmp_path, monkeypatch):
    monkeypatch.setenv("KNXFRAME_API_PORT", "9191")
    config = load_config(_write(tmp_path, "api:\n  port: 8000\n"))
    assert config["api"]["port"] == 9191


def test_bundled_config_loads(monkeypatch):
    monkeypatch.delenv("KNXFRAME_API_PORT", raising=False)
    root = os.path.dirname(os.path.dirname(__file__))
    config = load_config(os.path.join(root, "config.yaml"))
    assert config["gateway"]["host"] == "192.168.1.10"
    assert config["logging"]["level"] == "INFO"
