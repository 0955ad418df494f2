"""
SQLite persistence for command history, transcript and command logs.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..core.models import CommandLog, TranscriptLine

logger = logging.getLogger(__name__)


class ShellDB:
    """Durable store read once at startup and written on every mutation."""

    def __init__(self, db_path: str = str(Path.home() / ".navshell" / "navshell.db")):
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS history (
                position INTEGER PRIMARY KEY,
                command TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS transcript (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                kind TEXT NOT NULL,
                text TEXT NOT NULL,
                directory TEXT,
                branch TEXT,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS command_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                command TEXT NOT NULL,
                directory TEXT NOT NULL,
                started_at TEXT NOT NULL,
                duration_ms REAL NOT NULL,
                success INTEGER NOT NULL,
                output_lines INTEGER NOT NULL
            )
        """)
        self.conn.commit()

    def load_history(self) -> List[str]:
        """Return history entries from oldest to most recent."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT command FROM history ORDER BY position")
        return [row[0] for row in cursor.fetchall()]

    def save_history(self, entries: List[str]) -> None:
        """
        Replace the stored history with `entries`.

        Args:
            entries: Entries from oldest to most recent
        """
        with self.conn:
            self.conn.execute("DELETE FROM history")
            self.conn.executemany(
                "INSERT INTO history (position, command) VALUES (?, ?)",
                list(enumerate(entries)),
            )

    def append_transcript(self, line: TranscriptLine) -> None:
        """Persist one transcript line."""
        with self.conn:
            self.conn.execute(
                "INSERT INTO transcript (kind, text, directory, branch, created_at) VALUES (?, ?, ?, ?, ?)",
                (line.kind, line.text, line.directory, line.branch, line.created_at.isoformat()),
            )

    def load_transcript(self, limit: Optional[int] = None) -> List[TranscriptLine]:
        """
        Retrieve transcript lines in submission order.

        Args:
            limit: Optional limit on the number of most recent lines

        Returns:
            List of transcript lines, oldest first
        """
        cursor = self.conn.cursor()

        if limit:
            cursor.execute(
                "SELECT kind, text, directory, branch, created_at FROM transcript ORDER BY id DESC LIMIT ?",
                (limit,)
            )
            rows = list(reversed(cursor.fetchall()))
        else:
            cursor.execute("SELECT kind, text, directory, branch, created_at FROM transcript ORDER BY id")
            rows = cursor.fetchall()

        return [
            TranscriptLine(
                kind=row[0],
                text=row[1],
                directory=row[2],
                branch=row[3],
                created_at=datetime.fromisoformat(row[4]),
            )
            for row in rows
        ]

    def clear_transcript(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM transcript")

    def add_command_log(self, log: CommandLog) -> None:
        """Persist timing and outcome of one submission."""
        with self.conn:
            self.conn.execute(
                "INSERT INTO command_log (command, directory, started_at, duration_ms, success, output_lines) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    log.command,
                    log.directory,
                    log.started_at.isoformat(),
                    log.duration_ms,
                    int(log.success),
                    log.output_lines,
                ),
            )

    def get_command_logs(self, limit: Optional[int] = None) -> List[CommandLog]:
        """Retrieve command logs, oldest first."""
        cursor = self.conn.cursor()

        if limit:
            cursor.execute(
                "SELECT command, directory, started_at, duration_ms, success, output_lines "
                "FROM command_log ORDER BY id DESC LIMIT ?",
                (limit,)
            )
            rows = list(reversed(cursor.fetchall()))
        else:
            cursor.execute(
                "SELECT command, directory, started_at, duration_ms, success, output_lines "
                "FROM command_log ORDER BY id"
            )
            rows = cursor.fetchall()

        return [
            CommandLog(
                command=row[0],
                directory=row[1],
                started_at=datetime.fromisoformat(row[2]),
                duration_ms=row[3],
                success=bool(row[4]),
                output_lines=row[5],
            )
            for row in rows
        ]

    def clear_history(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM history")
        logger.debug("history cleared in %s", self.db_path)

    def close(self):
        """Close database connection."""
        self.conn.close()


def command_stats(logs: List[CommandLog], now: Optional[datetime] = None) -> dict:
    """
    Aggregate command logs.

    Returns:
        Dict with count, failures, average_duration_ms and commands_last_minute
    """
    if not logs:
        return {"count": 0, "failures": 0, "average_duration_ms": 0.0, "commands_last_minute": 0}

    now = now or datetime.now()
    recent = [log for log in logs if (now - log.started_at).total_seconds() <= 60]

    return {
        "count": len(logs),
        "failures": sum(1 for log in logs if not log.success),
        "average_duration_ms": sum(log.duration_ms for log in logs) / len(logs),
        "commands_last_minute": len(recent),
    }
