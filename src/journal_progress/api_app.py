from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from journal_progress.background import ProgressUpdater
from journal_progress.config import load_settings
from journal_progress.db import Database, JournalEntry
from journal_progress.logging_setup import setup_logging
from journal_progress.message_bank import (
    MessageContext,
    Outcome,
    ScreenContext,
    UserState,
    pick_bank_message,
    usage_stats,
    user_state_for,
)
from journal_progress.messages import (
    get_contextual_message,
    get_motivational_message,
    get_streak_status_message,
    get_year_completion_message,
)
from journal_progress.service import UserNotFoundError, get_user_progress_stats
from journal_progress.time_utils import Clock, local_clock

logger = logging.getLogger(__name__)


def _require_auth(request: Request, token: str | None) -> None:
    if not token:
        return
    header = request.headers.get("x-api-token")
    query = request.query_params.get("token")
    if header == token or query == token:
        return
    raise HTTPException(status_code=401, detail="Unauthorized")


def _require_user(request: Request, db: Database, token: str | None) -> int:
    _require_auth(request, token)
    raw = request.headers.get("x-user-id", "").strip()
    try:
        user_id = int(raw)
    except ValueError:
        raise HTTPException(status_code=401, detail="Missing user") from None
    if db.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user_id


def _require_admin(request: Request, db: Database, token: str | None) -> int:
    user_id = _require_user(request, db, token)
    user = db.get_user(user_id)
    if user is None or user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_id


def _entry_payload(entry: JournalEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "entry_date": entry.entry_date.isoformat(),
        "content": entry.content,
        "created_at": entry.created_at.isoformat(),
        "updated_at": entry.updated_at.isoformat(),
    }


class EntrySaveRequest(BaseModel):
    entry_date: date = Field(alias="date")
    content: dict[str, Any] = Field(default_factory=dict)


class InteractionTrackRequest(BaseModel):
    message_id: int
    session_id: str = Field(min_length=1)
    user_id: int | None = None
    context: ScreenContext
    user_state: UserState
    outcome: Outcome | None = None


class MessageCreateRequest(BaseModel):
    message_text: str = Field(min_length=1)
    context: MessageContext
    tone: str | None = None
    length: str | None = None


class MessageUpdateRequest(BaseModel):
    message_text: str | None = Field(default=None, min_length=1)
    context: MessageContext | None = None
    tone: str | None = None
    length: str | None = None
    is_active: bool | None = None


def build_api_app(
    db: Database,
    api_token: str | None = None,
    clock: Clock | None = None,
    updater: ProgressUpdater | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    now = clock or local_clock()
    owns_updater = updater is None
    refresher = updater or ProgressUpdater(db)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_updater:
            refresher.shutdown(wait=True)

    app = FastAPI(title="Journal Progress API", version="1.0.0", lifespan=lifespan)

    def _schedule_refresh(user_id: int) -> None:
        # Not awaited: failures are logged inside the updater and never reach the caller.
        refresher.schedule(user_id, now().date())

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "timestamp": now().isoformat()}

    @app.post("/api/entries")
    async def api_save_entry(request: Request, payload: EntrySaveRequest) -> dict[str, Any]:
        user_id = _require_user(request, db, api_token)
        entry = db.save_entry(user_id, payload.entry_date, payload.content, now())
        _schedule_refresh(user_id)
        return _entry_payload(entry)

    @app.get("/api/entries/range/{start_date}/{end_date}")
    async def api_entries_range(request: Request, start_date: date, end_date: date) -> list[dict[str, Any]]:
        user_id = _require_user(request, db, api_token)
        if end_date < start_date:
            raise HTTPException(status_code=400, detail="end_date is before start_date")
        return [_entry_payload(e) for e in db.list_entries_between(user_id, start_date, end_date)]

    @app.get("/api/entries/day/{month}/{day}")
    async def api_entries_on_day(request: Request, month: int, day: int) -> list[dict[str, Any]]:
        user_id = _require_user(request, db, api_token)
        if not 1 <= month <= 12 or not 1 <= day <= 31:
            raise HTTPException(status_code=400, detail="Invalid month or day")
        return [_entry_payload(e) for e in db.list_entries_on_day(user_id, month, day)]

    @app.get("/api/entries/{entry_date}")
    async def api_get_entry(request: Request, entry_date: date) -> dict[str, Any] | None:
        user_id = _require_user(request, db, api_token)
        entry = db.get_entry(user_id, entry_date)
        return _entry_payload(entry) if entry else None

    @app.delete("/api/entries/{entry_date}")
    async def api_delete_entry(request: Request, entry_date: date) -> dict[str, Any]:
        user_id = _require_user(request, db, api_token)
        if not db.delete_entry(user_id, entry_date):
            raise HTTPException(status_code=404, detail="Entry not found")
        _schedule_refresh(user_id)
        return {"success": True}

    @app.get("/api/progress/stats")
    async def api_progress_stats(request: Request) -> dict[str, Any]:
        user_id = _require_user(request, db, api_token)
        try:
            stats = get_user_progress_stats(db, user_id, now().date())
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        payload = stats.to_dict()
        payload["messages"] = {
            "main": get_motivational_message(stats, rng=rng),
            "streak_status": get_streak_status_message(stats),
            "year_completion_status": get_year_completion_message(stats),
        }
        return payload

    @app.get("/api/progress/message")
    async def api_progress_message(request: Request, context: str = "entry_page") -> dict[str, Any]:
        user_id = _require_user(request, db, api_token)
        try:
            stats = get_user_progress_stats(db, user_id, now().date())
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "message": get_contextual_message(stats, context, rng=rng),
            "context": context,
            "stats": {
                "current_streak": stats.current_streak,
                "best_streak": stats.best_streak,
                "year_completion": stats.year_completion,
                "tier_combination": stats.tier_combination,
            },
        }

    @app.get("/api/messages/random")
    async def api_random_message(request: Request, context: ScreenContext) -> dict[str, Any]:
        _require_auth(request, api_token)
        return pick_bank_message(db, context, rng=rng)

    @app.post("/api/messages/track")
    async def api_track_message(request: Request, payload: InteractionTrackRequest) -> dict[str, Any]:
        _require_auth(request, api_token)
        if db.get_message(payload.message_id) is None:
            raise HTTPException(status_code=404, detail="Message not found")
        interaction_id = db.track_message_interaction(
            payload.message_id,
            payload.session_id,
            payload.context,
            payload.user_state,
            now(),
            user_id=payload.user_id,
            outcome=payload.outcome,
        )
        return {"success": True, "interaction_id": interaction_id}

    @app.get("/api/messages/user-state")
    async def api_user_state(request: Request) -> dict[str, Any]:
        user_id = _require_user(request, db, api_token)
        count = db.count_user_entries(user_id)
        return {"user_state": user_state_for(count), "entry_count": count}

    @app.get("/api/admin/messages")
    async def api_admin_messages(request: Request) -> list[dict[str, Any]]:
        _require_admin(request, db, api_token)
        return db.list_messages_with_stats()

    @app.post("/api/admin/messages")
    async def api_admin_create_message(request: Request, payload: MessageCreateRequest) -> dict[str, Any]:
        _require_admin(request, db, api_token)
        message = db.create_message(
            payload.message_text,
            payload.context,
            now(),
            tone=payload.tone,
            length=payload.length,
        )
        return message.to_dict()

    @app.put("/api/admin/messages/{message_id}")
    async def api_admin_update_message(
        message_id: int, request: Request, payload: MessageUpdateRequest
    ) -> dict[str, Any]:
        _require_admin(request, db, api_token)
        # tone and length may be cleared; the other columns are NOT NULL
        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in ("tone", "length")
        }
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        message = db.update_message(message_id, updates)
        if message is None:
            raise HTTPException(status_code=404, detail="Message not found")
        return message.to_dict()

    @app.delete("/api/admin/messages/{message_id}")
    async def api_admin_delete_message(message_id: int, request: Request) -> dict[str, Any]:
        _require_admin(request, db, api_token)
        if not db.delete_message(message_id):
            raise HTTPException(status_code=404, detail="Message not found")
        return {"success": True}

    @app.get("/api/admin/messages/{message_id}/stats")
    async def api_admin_message_stats(message_id: int, request: Request) -> list[dict[str, Any]]:
        _require_admin(request, db, api_token)
        return db.get_message_stats(message_id)

    @app.get("/api/admin/stats")
    async def api_admin_stats(request: Request, email: str | None = None) -> dict[str, Any]:
        # Embeddable usage summary: only the shared token is checked.
        _require_auth(request, api_token)
        return usage_stats(db, now().date(), email=email)

    return app


def run_api() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    db = Database(settings.database_path)
    updater = ProgressUpdater(db, max_workers=settings.progress_workers)
    app = build_api_app(
        db,
        api_token=settings.api_token,
        clock=local_clock(settings.tz),
        updater=updater,
    )
    logger.info("serving journal progress api on %s:%s", settings.api_host, settings.api_port)
    try:
        uvicorn.run(app, host=settings.api_host, port=settings.api_port)
    finally:
        updater.shutdown(wait=True)
