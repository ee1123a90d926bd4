"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ezrss.config import SearchOptions, load_config

_ENV_VARS = (
    "EZRSS_SSL",
    "EZRSS_EXACT",
    "EZRSS_MAX_CONCURRENCY",
    "EZRSS_TIMEOUT_S",
    "EZRSS_HOST",
    "EZRSS_USER_AGENT",
    "EZRSS_PARSE_ERRORS",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes values loaded from .env files
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return env_file


def test_defaults(clean_env):
    options = load_config(clean_env)
    assert options == SearchOptions()
    assert options.max_concurrency == 20
    assert options.timeout_s is None
    assert options.parse_errors == "raise"


def test_env_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("EZRSS_SSL", "yes")
    monkeypatch.setenv("EZRSS_EXACT", "1")
    monkeypatch.setenv("EZRSS_MAX_CONCURRENCY", "5")
    monkeypatch.setenv("EZRSS_TIMEOUT_S", "2.5")
    monkeypatch.setenv("EZRSS_HOST", "mirror.example.org")
    monkeypatch.setenv("EZRSS_PARSE_ERRORS", "record")

    options = load_config(clean_env)
    assert options.ssl is True
    assert options.exact is True
    assert options.max_concurrency == 5
    assert options.timeout_s == 2.5
    assert options.host == "mirror.example.org"
    assert options.parse_errors == "record"


def test_env_file_is_loaded(clean_env):
    clean_env.write_text("EZRSS_EXACT=true\n")
    assert load_config(clean_env).exact is True


def test_false_values(clean_env, monkeypatch):
    monkeypatch.setenv("EZRSS_SSL", "off")
    assert load_config(clean_env).ssl is False


def test_invalid_concurrency_rejected():
    with pytest.raises(ValidationError):
        SearchOptions(max_concurrency=0)


def test_invalid_parse_errors_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("EZRSS_PARSE_ERRORS", "ignore")
    with pytest.raises(ValidationError):
        load_config(clean_env)


@pytest.mark.parametrize(
    ("name", "value"),
    [("EZRSS_MAX_CONCURRENCY", "many"), ("EZRSS_TIMEOUT_S", "soon")],
)
def test_malformed_numbers_rejected(clean_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        load_config(clean_env)
