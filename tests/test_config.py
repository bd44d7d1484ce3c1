from __future__ import annotations

import pytest

from kinship.config import KinshipConfig, load_config

ENV_VARS = (
    "KINSHIP_DB_PATH",
    "KINSHIP_LOCALE",
    "KINSHIP_MAX_VISITED",
    "KINSHIP_FETCH_CONCURRENCY",
    "KINSHIP_PARALLEL_FETCH",
    "KINSHIP_CACHE_SIZE",
    "KINSHIP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = load_config()

    assert cfg.db_path == "./data/kinship.db"
    assert cfg.locale == "en"
    assert cfg.max_visited == 100_000
    assert cfg.fetch_concurrency == 8
    assert cfg.parallel_fetch is True
    assert cfg.cache_size == 128
    assert cfg.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("KINSHIP_DB_PATH", "/tmp/family.db")
    monkeypatch.setenv("KINSHIP_LOCALE", "ru")
    monkeypatch.setenv("KINSHIP_MAX_VISITED", "500")
    monkeypatch.setenv("KINSHIP_PARALLEL_FETCH", "off")
    monkeypatch.setenv("KINSHIP_CACHE_SIZE", "0")
    monkeypatch.setenv("KINSHIP_LOG_LEVEL", "DEBUG")

    cfg = load_config()

    assert cfg.db_path == "/tmp/family.db"
    assert cfg.locale == "ru"
    assert cfg.max_visited == 500
    assert cfg.parallel_fetch is False
    assert cfg.cache_size == 0
    assert cfg.log_level == "DEBUG"


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("KINSHIP_LOCALE", "fr")
    monkeypatch.setenv("KINSHIP_MAX_VISITED", "lots")
    monkeypatch.setenv("KINSHIP_FETCH_CONCURRENCY", "0")
    monkeypatch.setenv("KINSHIP_PARALLEL_FETCH", "maybe")
    monkeypatch.setenv("KINSHIP_CACHE_SIZE", "-5")

    cfg = load_config()

    assert cfg.locale == "en"
    assert cfg.max_visited == 100_000
    assert cfg.fetch_concurrency == 1
    assert cfg.parallel_fetch is True
    assert cfg.cache_size == 0


def test_frozen():
    cfg = KinshipConfig()
    with pytest.raises(AttributeError):
        cfg.locale = "ru"
