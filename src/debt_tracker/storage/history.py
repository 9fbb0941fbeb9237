"""SQLite store of saved snapshot rollups, one row per analysis per actor."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..analysis.models import SnapshotResult
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50


@dataclass(frozen=True)
class RollupRecord:
    id: str
    actor_id: str
    repo_url: str
    repo_name: str
    stars: int
    language: Optional[str]
    avg_ai_likelihood: float
    avg_technical_debt: float
    avg_cognitive_debt: float
    total_files: int
    high_risk_files: int
    is_favorite: bool
    created_at: str


class HistoryStore:
    """Rollup records scoped by actor.

    Every statement filters on ``actor_id``; one actor can never read,
    flag or delete another's rows.

    Usage::

        with HistoryStore(".debt-tracker/history.db") as store:
            store.save("alice", "owner/repo", snapshot)
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and its table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("History store connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "HistoryStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _migrate(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analysis_history (
                id                  TEXT    PRIMARY KEY,
                actor_id            TEXT    NOT NULL,
                repo_url            TEXT    NOT NULL,
                repo_name           TEXT    NOT NULL,
                stars               INTEGER NOT NULL DEFAULT 0,
                language            TEXT,
                avg_ai_likelihood   REAL    NOT NULL DEFAULT 0,
                avg_technical_debt  REAL    NOT NULL DEFAULT 0,
                avg_cognitive_debt  REAL    NOT NULL DEFAULT 0,
                total_files         INTEGER NOT NULL DEFAULT 0,
                high_risk_files     INTEGER NOT NULL DEFAULT 0,
                is_favorite         INTEGER NOT NULL DEFAULT 0,
                created_at          TEXT    NOT NULL
            )
            """
        )
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_history_actor "
            "ON analysis_history(actor_id, created_at)"
        )
        self.conn.commit()

    # ── operations ────────────────────────────────────────────────

    def save(self, actor_id: str, repo_url: str, result: SnapshotResult) -> RollupRecord:
        """Persist the headline averages of a snapshot for actor_id."""
        if not actor_id:
            raise ValueError("actor_id is required")

        summary = result.summary
        record = RollupRecord(
            id=str(uuid.uuid4()),
            actor_id=actor_id,
            repo_url=repo_url,
            repo_name=result.repo_name,
            stars=result.stars,
            language=result.language,
            avg_ai_likelihood=round(summary.avg_ai_likelihood, 2),
            avg_technical_debt=round(summary.avg_technical_debt, 2),
            avg_cognitive_debt=round(summary.avg_cognitive_debt, 2),
            total_files=result.total_files,
            high_risk_files=summary.high_risk_files,
            is_favorite=False,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.conn.execute(
            """
            INSERT INTO analysis_history (
                id, actor_id, repo_url, repo_name, stars, language,
                avg_ai_likelihood, avg_technical_debt, avg_cognitive_debt,
                total_files, high_risk_files, is_favorite, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.id,
                record.actor_id,
                record.repo_url,
                record.repo_name,
                record.stars,
                record.language,
                record.avg_ai_likelihood,
                record.avg_technical_debt,
                record.avg_cognitive_debt,
                record.total_files,
                record.high_risk_files,
                int(record.is_favorite),
                record.created_at,
            ),
        )
        self.conn.commit()
        logger.debug("Saved rollup %s for %s", record.id, record.repo_name)
        return record

    def list(self, actor_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[RollupRecord]:
        """Actor's records, newest first."""
        rows = self.conn.execute(
            """
            SELECT * FROM analysis_history
            WHERE actor_id = ?
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (actor_id, limit),
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def set_favorite(self, actor_id: str, record_id: str, favorite: bool = True) -> bool:
        """Flag or unflag a record. Returns False if actor owns no such record."""
        cursor = self.conn.execute(
            "UPDATE analysis_history SET is_favorite = ? WHERE id = ? AND actor_id = ?",
            (int(favorite), record_id, actor_id),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def delete(self, actor_id: str, record_id: str) -> bool:
        """Remove a record. Returns False if actor owns no such record."""
        cursor = self.conn.execute(
            "DELETE FROM analysis_history WHERE id = ? AND actor_id = ?",
            (record_id, actor_id),
        )
        self.conn.commit()
        return cursor.rowcount > 0


def _row_to_record(row: sqlite3.Row) -> RollupRecord:
    return RollupRecord(
        id=row["id"],
        actor_id=row["actor_id"],
        repo_url=row["repo_url"],
        repo_name=row["repo_name"],
        stars=row["stars"],
        language=row["language"],
        avg_ai_likelihood=row["avg_ai_likelihood"],
        avg_technical_debt=row["avg_technical_debt"],
        avg_cognitive_debt=row["avg_cognitive_debt"],
        total_files=row["total_files"],
        high_risk_files=row["high_risk_files"],
        is_favorite=bool(row["is_favorite"]),
        created_at=row["created_at"],
    )
