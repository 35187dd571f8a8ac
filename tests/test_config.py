"""Tests for tds.config."""

import json

import pytest

import tds.config
from tds.config import Config, get_config, load_config


@pytest.fixture(autouse=True)
def restore_global_config():
    saved = tds.config.config
    yield
    tds.config.config = saved


def test_defaults() -> None:
    config = Config()
    assert config.get("http.timeout") == 20
    assert config.get("http.concurrency") == 8
    assert config.get("images.placeholder") == 2000
    assert config.get("output.filename") == "tds.html"
    assert config.get("feed.origin") == "stallman.org"


def test_missing_key_returns_default() -> None:
    config = Config()
    assert config.get("http.nope") is None
    assert config.get("http.timeout.deeper", "x") == "x"
    assert config.get("nothing", 5) == 5


def test_yaml_file_is_merged(tmp_path) -> None:
    path = tmp_path / "tds.yaml"
    path.write_text("http:\n  timeout: 5\noutput:\n  css: style.css\n")

    config = Config(str(path))

    assert config.get("http.timeout") == 5
    assert config.get("http.concurrency") == 8
    assert config.get("output.css") == "style.css"


def test_json_file_is_merged(tmp_path) -> None:
    path = tmp_path / "tds.json"
    path.write_text(json.dumps({"images": {"placeholder": 500}}))
    assert Config(str(path)).get("images.placeholder") == 500


def test_unsupported_format_falls_back_to_defaults(tmp_path, caplog) -> None:
    path = tmp_path / "tds.ini"
    path.write_text("[http]\ntimeout = 5\n")

    config = Config(str(path))

    assert config.get("http.timeout") == 20
    assert "Unsupported config file format" in caplog.text


def test_missing_file_falls_back_to_defaults(tmp_path) -> None:
    assert Config(str(tmp_path / "absent.yaml")).get("http.timeout") == 20


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TDS_HTTP_TIMEOUT", "45")
    monkeypatch.setenv("TDS_HTTP_AGENT", "tds-test")
    monkeypatch.setenv("TDS_DIAGNOSTICS_VERBOSE", "true")

    config = Config()

    assert config.get("http.timeout") == 45
    assert config.get("http.agent") == "tds-test"
    assert config.get("diagnostics.verbose") is True


def test_load_config_replaces_global(tmp_path) -> None:
    path = tmp_path / "tds.yml"
    path.write_text("output:\n  filename: digest.html\n")

    load_config(str(path))

    assert get_config("output.filename") == "digest.html"
