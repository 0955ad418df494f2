"""
Tests for the SQLite store.
"""

from datetime import datetime, timedelta

from navshell.core.models import CommandLog, TranscriptLine
from navshell.memory.db import ShellDB, command_stats


def test_transcript_round_trip(tmp_path):
    """Test that transcript lines keep their snapshots."""
    db = ShellDB(str(tmp_path / "test.db"))

    db.append_transcript(TranscriptLine(kind="command", text="$ ls", directory="/work", branch="main"))
    db.append_transcript(TranscriptLine(kind="output", text="a.txt"))
    db.append_transcript(TranscriptLine(kind="error", text="boom"))

    lines = db.load_transcript()

    assert [line.kind for line in lines] == ["command", "output", "error"]
    assert lines[0].directory == "/work"
    assert lines[0].branch == "main"
    assert lines[1].directory is None

    db.close()


def test_transcript_limit_returns_most_recent(tmp_path):
    """Test that a limit keeps the newest lines in order."""
    db = ShellDB(str(tmp_path / "test.db"))
    for i in range(5):
        db.append_transcript(TranscriptLine(kind="output", text=str(i)))

    assert [line.text for line in db.load_transcript(limit=2)] == ["3", "4"]

    db.clear_transcript()
    assert db.load_transcript() == []
    db.close()


def test_command_logs(tmp_path):
    """Test storing and reading command logs."""
    db = ShellDB(str(tmp_path / "test.db"))
    started = datetime(2024, 1, 1, 12, 0, 0)

    db.add_command_log(CommandLog(
        command="ls", directory="/work", started_at=started,
        duration_ms=12.5, success=True, output_lines=3,
    ))
    db.add_command_log(CommandLog(
        command="false", directory="/work", started_at=started,
        duration_ms=7.5, success=False,
    ))

    logs = db.get_command_logs()
    assert len(logs) == 2
    assert logs[0].command == "ls"
    assert logs[0].output_lines == 3
    assert logs[1].success is False
    assert db.get_command_logs(limit=1)[0].command == "false"

    db.close()


def test_clear_history(tmp_path):
    """Test that clearing history leaves other tables alone."""
    db = ShellDB(str(tmp_path / "test.db"))
    db.save_history(["a", "b"])
    db.append_transcript(TranscriptLine(kind="output", text="x"))

    db.clear_history()

    assert db.load_history() == []
    assert len(db.load_transcript()) == 1
    db.close()


def test_command_stats():
    """Test aggregation of command logs."""
    now = datetime(2024, 1, 1, 12, 0, 0)
    logs = [
        CommandLog(command="a", directory="/", started_at=now - timedelta(seconds=10),
                   duration_ms=10, success=True),
        CommandLog(command="b", directory="/", started_at=now - timedelta(minutes=5),
                   duration_ms=30, success=False),
    ]

    stats = command_stats(logs, now=now)

    assert stats["count"] == 2
    assert stats["failures"] == 1
    assert stats["average_duration_ms"] == 20
    assert stats["commands_last_minute"] == 1


def test_command_stats_empty():
    """Test aggregation with no logs."""
    assert command_stats([])["count"] == 0
