from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from journal_progress.time_utils import DEFAULT_TZ


@dataclass(frozen=True)
class Settings:
    database_path: Path
    tz: str
    api_host: str
    api_port: int
    api_token: str | None
    progress_workers: int
    log_level: str


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        raw = line.strip()
        if not raw or raw.startswith("#") or "=" not in raw:
            continue
        key, value = raw.split("=", maxsplit=1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _parse_int(value: str | None, default: int, minimum: int | None = None) -> int:
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return default
    return parsed


def load_settings(env_path: Path = Path(".env")) -> Settings:
    _load_env_file(env_path)

    return Settings(
        database_path=Path(os.getenv("DATABASE_PATH", "./data/journal.db")),
        tz=os.getenv("TZ", DEFAULT_TZ) or DEFAULT_TZ,
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=_parse_int(os.getenv("API_PORT"), 8000, minimum=1),
        api_token=os.getenv("API_TOKEN") or None,
        progress_workers=_parse_int(os.getenv("PROGRESS_WORKERS"), 2, minimum=1),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
