from __future__ import annotations

from pathlib import Path

from journal_progress.config import load_settings

KEYS = ("DATABASE_PATH", "API_HOST", "API_PORT", "API_TOKEN", "PROGRESS_WORKERS", "LOG_LEVEL")


def _clear_env(monkeypatch) -> None:
    # set first so monkeypatch restores the original state afterwards
    for key in KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)


def test_defaults_without_env(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    settings = load_settings(tmp_path / "missing.env")
    assert settings.database_path == Path("./data/journal.db")
    assert settings.api_port == 8000
    assert settings.api_token is None
    assert settings.progress_workers == 2


def test_env_file_fills_missing_values_only(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    env = tmp_path / ".env"
    env.write_text(
        "# local overrides\n"
        "DATABASE_PATH='/tmp/j.db'\n"
        "API_PORT=9100\n"
        "API_TOKEN=\"secret\"\n"
        "PROGRESS_WORKERS=0\n"
    )
    monkeypatch.setenv("API_HOST", "0.0.0.0")

    settings = load_settings(env)

    assert settings.database_path == Path("/tmp/j.db")
    assert settings.api_port == 9100
    assert settings.api_token == "secret"
    assert settings.api_host == "0.0.0.0"
    assert settings.progress_workers == 2


def test_bad_port_falls_back(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("API_PORT", "not-a-port")
    assert load_settings(tmp_path / "missing.env").api_port == 8000
