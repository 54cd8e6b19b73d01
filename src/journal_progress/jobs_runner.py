from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from journal_progress.config import Settings
from journal_progress.db import Database
from journal_progress.service import update_completion_samples, update_user_streak
from journal_progress.time_utils import now_local

logger = logging.getLogger(__name__)

JOB_NAMES = ("refresh_progress",)


@dataclass(frozen=True)
class RefreshSummary:
    refreshed: int
    failed: int


def refresh_all_progress(db: Database, today: date) -> RefreshSummary:
    """Recompute streak and samples for every user, one user at a time."""
    refreshed = 0
    failed = 0
    for user_id in db.list_user_ids():
        try:
            streak = update_user_streak(db, user_id, today)
            update_completion_samples(db, user_id, today)
        except Exception:
            failed += 1
            logger.exception("progress refresh failed user_id=%s", user_id)
            continue
        refreshed += 1
        logger.info(
            "refreshed progress user_id=%s streak=%s best=%s",
            user_id,
            streak.current_streak,
            streak.best_streak,
        )
    logger.info("refresh_progress completed: refreshed=%s failed=%s", refreshed, failed)
    return RefreshSummary(refreshed=refreshed, failed=failed)


def run_job(job_name: str, db: Database, settings: Settings) -> None:
    if job_name == "refresh_progress":
        refresh_all_progress(db, now_local(settings.tz).date())
    else:
        raise SystemExit(
            "Unknown job "
            f"'{job_name}'. Expected one of: {', '.join(JOB_NAMES)}"
        )
