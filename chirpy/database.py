"""SQLite-backed persistence for Chirpy users."""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from uuid import UUID

from .config import resolve_database_path
from .models import User


class StoreError(RuntimeError):
    """Raised when the underlying database rejects or fails an operation."""


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """Simple wrapper around SQLite for persisting users."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE
                );

                CREATE INDEX IF NOT EXISTS idx_users_created_at ON users(created_at);
                """
            )

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create_user(self, email: str) -> User:
        """Insert a new user and return it with its generated id and timestamps."""

        user_id = uuid.uuid4()
        now = _current_timestamp()
        serialized = _serialize_datetime(now)

        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO users (id, created_at, updated_at, email) VALUES (?, ?, ?, ?)",
                    (str(user_id), serialized, serialized, email),
                )
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

        return User(id=user_id, created_at=now, updated_at=now, email=email)

    def delete_all_users(self) -> int:
        """Remove every user row and return how many were deleted."""

        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM users")
                return cursor.rowcount
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def get_user(self, user_id: UUID) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def list_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY created_at, email").fetchall()
        return [self._row_to_user(row) for row in rows]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=UUID(str(row["id"])),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
            email=str(row["email"]),
        )


__all__ = ["Database", "StoreError", "resolve_database_path"]
