from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Callable

from journal_progress.db import Database
from journal_progress.service import update_completion_samples, update_user_streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshHandle:
    streak: Future[bool]
    completion: Future[bool]

    def done(self) -> bool:
        return self.streak.done() and self.completion.done()


def _run_step(step: str, fn: Callable[[], object], user_id: int) -> bool:
    try:
        fn()
    except Exception:
        logger.exception("progress refresh failed step=%s user_id=%s", step, user_id)
        return False
    logger.debug("progress refresh done step=%s user_id=%s", step, user_id)
    return True


class ProgressUpdater:
    """Runs the streak and completion recomputes after an entry write.

    Callers get futures back and never wait on them. A failed step is logged and
    dropped, never retried: the next entry write recomputes from full history.
    Futures resolve to True on success and False on a logged failure.
    """

    def __init__(self, db: Database, max_workers: int = 2) -> None:
        self.db = db
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="progress")

    def schedule(self, user_id: int, today: date) -> RefreshHandle:
        streak = self._executor.submit(
            _run_step, "streak", lambda: update_user_streak(self.db, user_id, today), user_id
        )
        completion = self._executor.submit(
            _run_step, "completion", lambda: update_completion_samples(self.db, user_id, today), user_id
        )
        return RefreshHandle(streak=streak, completion=completion)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
