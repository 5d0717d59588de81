"""Settings loading from the environment."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from spa_server.config import Settings, DEFAULT_PORT

PROJECT_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PORT", "HOST", "APP_ENV", "NODE_ENV", "DIST_DIR", "INDEX_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _load() -> Settings:
    return Settings(_env_file=None)


def test_defaults():
    s = _load()
    assert s.PORT == 5000
    assert s.HOST == "0.0.0.0"
    assert s.is_development is False
    assert s.DIST_DIR == (PROJECT_DIR / "dist").resolve()
    assert s.index_path == s.DIST_DIR / "index.html"


def test_port_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert _load().PORT == 8080


@pytest.mark.parametrize("value", ["abc", "", "  ", "0", "70000", "-1", "80.5"])
def test_invalid_port_falls_back_to_default(monkeypatch, value):
    monkeypatch.setenv("PORT", value)
    assert _load().PORT == DEFAULT_PORT


@pytest.mark.parametrize(
    "name,value,expected",
    [
        ("NODE_ENV", "development", True),
        ("APP_ENV", "development", True),
        ("APP_ENV", " Development ", True),
        ("NODE_ENV", "production", False),
        ("APP_ENV", "staging", False),
    ],
)
def test_development_flag(monkeypatch, name, value, expected):
    monkeypatch.setenv(name, value)
    assert _load().is_development is expected


def test_relative_dist_dir_is_resolved_against_project(monkeypatch):
    monkeypatch.setenv("DIST_DIR", "build/client")
    s = _load()
    assert s.DIST_DIR.is_absolute()
    assert s.DIST_DIR == (PROJECT_DIR / "build" / "client").resolve()


def test_absolute_dist_dir_is_kept(tmp_path, monkeypatch):
    monkeypatch.setenv("DIST_DIR", str(tmp_path))
    assert _load().DIST_DIR == tmp_path.resolve()


def test_custom_index_file(tmp_path):
    s = Settings(_env_file=None, DIST_DIR=tmp_path, INDEX_FILE="app.html")
    assert s.index_path == tmp_path.resolve() / "app.html"


def test_settings_are_immutable():
    s = _load()
    with pytest.raises(ValidationError):
        s.PORT = 9000
