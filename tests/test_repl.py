"""
Tests for REPL rendering and slash command handling.
"""

from types import SimpleNamespace

import pytest
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.keys import Keys
from rich.text import Text

from navshell.config import NavShellConfig
from navshell.core.models import TranscriptLine
from navshell.core.orchestrator import Orchestrator
from navshell.interface import repl
from navshell.interface.console import console
from navshell.interface.repl import (
    create_key_bindings,
    format_line,
    handle_command,
    is_repl_command,
    show_startup_info,
)
from navshell.memory.history import CommandHistory
from navshell.session import SessionState


def test_format_line_styles():
    """Test that each transcript kind gets its colour."""
    error = format_line(TranscriptLine(kind="error", text="boom"))
    command = format_line(TranscriptLine(kind="command", text="$ ls"))

    assert isinstance(error, Text)
    assert "red" in str(error.style)
    assert "green" in str(command.style)


def test_format_line_keeps_brackets_verbatim():
    """Test that command output is not parsed as rich markup."""
    line = format_line(TranscriptLine(kind="output", text="[bold]not markup[/bold]"))

    assert line.plain == "[bold]not markup[/bold]"


def test_is_repl_command():
    """Test that only known slash commands are intercepted."""
    assert is_repl_command("/help")
    assert is_repl_command("/history 5")
    assert is_repl_command("/EXIT")
    assert not is_repl_command("/usr/bin/env")
    assert not is_repl_command("/")
    assert not is_repl_command("help")


def test_handle_command_exit(tmp_path):
    """Test that /exit stops the loop and others continue it."""
    orchestrator = Orchestrator(home=str(tmp_path))

    assert handle_command("/exit", orchestrator) is False
    assert handle_command("/aliases", orchestrator) is True


def test_handle_command_history(tmp_path):
    """Test that /history prints recent commands."""
    orchestrator = Orchestrator(home=str(tmp_path))
    orchestrator.history.record("git status")
    orchestrator.history.record("make [all]")

    with console.capture() as capture:
        handle_command("/history 1", orchestrator)

    output = capture.get()
    assert "make [all]" in output
    assert "git status" not in output


def test_handle_command_clear(tmp_path):
    """Test that /clear empties the transcript."""
    orchestrator = Orchestrator(home=str(tmp_path))
    orchestrator.transcript.append(TranscriptLine(kind="output", text="x"))

    with console.capture():
        handle_command("/clear", orchestrator)

    assert orchestrator.transcript == []


def test_handle_command_unknown(tmp_path):
    """Test the message for an unknown command."""
    orchestrator = Orchestrator(home=str(tmp_path))

    with console.capture() as capture:
        assert handle_command("/bogus", orchestrator) is True

    assert "Unknown command" in capture.get()


def _binding(bindings, key):
    return bindings.get_bindings_for_keys((key,))[0].handler


def test_key_bindings_recall_into_buffer():
    """Test that Up/Down move through history and restore the draft."""
    history = CommandHistory()
    history.record("ls")
    history.record("git status")
    bindings = create_key_bindings(history)
    up, down = _binding(bindings, Keys.Up), _binding(bindings, Keys.Down)

    buffer = Buffer()
    buffer.text = "draf"
    event = SimpleNamespace(current_buffer=buffer)

    up(event)
    assert buffer.text == "git status"
    assert buffer.cursor_position == len("git status")

    up(event)
    up(event)
    assert buffer.text == "ls"

    down(event)
    assert buffer.text == "git status"

    down(event)
    assert buffer.text == "draf"
    assert not history.browsing

    down(event)
    assert buffer.text == "draf"


def test_startup_info_shows_brackets_verbatim(tmp_path):
    """Test that directory and branch names are not parsed as markup."""
    orchestrator = Orchestrator(config=NavShellConfig(show_branch=False), home=str(tmp_path))
    orchestrator.session.commit(SessionState(
        current_directory="/work/a[/b]",
        branch_label="fix[/bold]",
    ))

    with console.capture() as capture:
        show_startup_info(orchestrator.config, orchestrator)

    output = capture.get()
    assert "/work/a[/b]" in output
    assert "fix[/bold]" in output


@pytest.mark.asyncio
async def test_slash_command_ends_history_browsing(tmp_path, monkeypatch):
    """Test that lines handled by the REPL itself reset the recall cursor."""
    orchestrator = Orchestrator(config=NavShellConfig(show_branch=False), home=str(tmp_path))
    orchestrator.history.record("echo one")
    orchestrator.history.record("echo two")
    browsing = []

    class ScriptedSession:
        def __init__(self, key_bindings=None):
            self.lines = iter(["/help", "", "/exit"])

        async def prompt_async(self, message):
            browsing.append(orchestrator.history.browsing)
            orchestrator.history.recall_previous("draft")
            return next(self.lines)

    monkeypatch.setattr(repl, "PromptSession", ScriptedSession)

    with console.capture():
        await repl.run_repl(orchestrator.config, orchestrator)

    assert browsing == [False, False, False]
    assert not orchestrator.history.browsing
    assert orchestrator.history.cursor == -1
