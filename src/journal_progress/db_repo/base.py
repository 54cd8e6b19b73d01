from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path


class BaseDatabase:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # background refreshes open their own connections from worker threads
        conn = sqlite3.connect(self.path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """
            )
            current = {row["version"] for row in conn.execute("SELECT version FROM schema_migrations")}

            migrations: dict[int, str] = {
                1: """
                    CREATE TABLE users (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        email TEXT NOT NULL UNIQUE,
                        display_name TEXT,
                        role TEXT NOT NULL DEFAULT 'user' CHECK(role IN ('user', 'admin')),
                        created_at TEXT NOT NULL
                    );

                    CREATE TABLE journal_entries (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user_id INTEGER NOT NULL,
                        entry_date TEXT NOT NULL,
                        content TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        UNIQUE(user_id, entry_date),
                        FOREIGN KEY (user_id) REFERENCES users(id)
                    );

                    CREATE INDEX idx_entries_user_date ON journal_entries(user_id, entry_date);
                """,
                2: """
                    ALTER TABLE users ADD COLUMN current_streak INTEGER NOT NULL DEFAULT 0;
                    ALTER TABLE users ADD COLUMN best_streak INTEGER NOT NULL DEFAULT 0;
                    ALTER TABLE users ADD COLUMN current_streak_date TEXT;
                """,
                3: """
                    ALTER TABLE users ADD COLUMN completion_samples TEXT NOT NULL DEFAULT '[]';
                """,
                4: """
                    CREATE TABLE motivational_messages (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        message_text TEXT NOT NULL,
                        context TEXT NOT NULL CHECK(context IN ('login', 'entry', 'both')),
                        tone TEXT,
                        length TEXT,
                        is_active INTEGER NOT NULL DEFAULT 1,
                        created_at TEXT NOT NULL
                    );

                    CREATE TABLE message_interactions (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        message_id INTEGER NOT NULL,
                        user_id INTEGER,
                        session_id TEXT NOT NULL,
                        context TEXT NOT NULL,
                        user_state TEXT NOT NULL,
                        outcome TEXT,
                        created_at TEXT NOT NULL,
                        completed_at TEXT,
                        FOREIGN KEY (message_id) REFERENCES motivational_messages(id),
                        FOREIGN KEY (user_id) REFERENCES users(id)
                    );

                    CREATE INDEX idx_interactions_session ON message_interactions(session_id, message_id, context);
                """,
            }

            now = datetime.now().isoformat(timespec="seconds")
            for version in sorted(migrations):
                if version in current:
                    continue
                conn.executescript(migrations[version])
                conn.execute(
                    "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?)",
                    (version, now),
                )
