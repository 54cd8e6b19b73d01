from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from journal_progress.config import load_settings
from journal_progress.db import Database
from journal_progress.jobs_runner import run_job
from journal_progress.logging_setup import setup_logging


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("Usage: python jobs.py <refresh_progress>")

    settings = load_settings()
    setup_logging(settings.log_level)
    db = Database(settings.database_path)
    run_job(sys.argv[1], db, settings)


if __name__ == "__main__":
    main()
