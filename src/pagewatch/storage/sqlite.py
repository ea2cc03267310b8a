"""SQLite-backed key-value store kept in ``.pagewatch/`` under the working dir."""

from __future__ import annotations

import asyncio
import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Mapping

from ..exceptions import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


class SqliteStore:
    """Persist JSON values by key in ``<data_dir>/store.db``.

    Each operation opens its own connection on a worker thread, so the store
    can be shared freely between coroutines.

    Usage::

        store = SqliteStore(".pagewatch")
        await store.set({"key": [1, 2, 3]})
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.db_dir: Path = Path(data_dir)
        self.db_path: Path = self.db_dir / "store.db"
        self._migrated = False
        self._migrate_lock = threading.Lock()

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create the data dir and write a .gitignore so it stays untracked."""
        self.db_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.db_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text("*\n")

    def _connect(self) -> sqlite3.Connection:
        self._ensure_dir()
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        with self._migrate_lock:
            if not self._migrated:
                self._migrate(conn)
                self._migrated = True
                logger.debug("Key-value store ready at %s", self.db_path)
        return conn

    def _migrate(self, conn: sqlite3.Connection) -> None:
        """Idempotently create all tables."""
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER NOT NULL
                )
                """
            )
            row = conn.execute("SELECT version FROM schema_version").fetchone()
            if row is None:
                conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)",
                    (_SCHEMA_VERSION,),
                )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    # ── blocking operations (run on a worker thread) ──────────────

    def _get_sync(self, key: str) -> dict[str, Any]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return {}
        return {key: json.loads(row[0])}

    def _set_sync(self, items: Mapping[str, Any]) -> None:
        rows = [(key, json.dumps(value)) for key, value in items.items()]
        conn = self._connect()
        try:
            with conn:
                conn.executemany(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    rows,
                )
        finally:
            conn.close()

    def _remove_sync(self, key: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        finally:
            conn.close()

    # ── async API ─────────────────────────────────────────────────

    async def get(self, key: str) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except (sqlite3.Error, OSError, ValueError) as e:
            raise StorageError("get", key, str(e)) from e

    async def set(self, items: Mapping[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._set_sync, dict(items))
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            raise StorageError("set", ", ".join(items), str(e)) from e

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove_sync, key)
        except (sqlite3.Error, OSError) as e:
            raise StorageError("remove", key, str(e)) from e
