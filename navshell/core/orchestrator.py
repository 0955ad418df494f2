"""
Sequences alias expansion, classification, navigation and execution for each
submitted line, and is the only place session state is changed.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional, Tuple

from .aliases import expand_alias
from .errors import (
    BranchQueryFailure,
    CommandExecutionError,
    NavigationNotFound,
    NoPreviousDirectory,
    SessionBusyError,
)
from .executor import CommandExecutor, chain, strip_ansi
from .models import CommandLog, ExplicitChange, ImplicitJump, Shortcut, TranscriptLine
from .resolver import classify, command_line, is_invocable, navigate, plan_change, probe
from ..config import NavShellConfig
from ..memory.db import ShellDB
from ..memory.history import CommandHistory
from ..session import SessionState, SessionStore

logger = logging.getLogger(__name__)

CLEAR_COMMAND = "clear"
NO_OUTPUT = "(no output)"
BRANCH_QUERY = "git rev-parse --abbrev-ref HEAD"

Outcome = Tuple[List[TranscriptLine], bool]


class Orchestrator:
    """
    Turns one submitted line into transcript lines and, for navigation, a new
    session state.

    Submissions are processed one at a time: the busy flag rejects a new
    line while the executor is still working on the previous one.
    """

    def __init__(
        self,
        config: Optional[NavShellConfig] = None,
        executor: Optional[CommandExecutor] = None,
        db: Optional[ShellDB] = None,
        home: Optional[str] = None,
    ):
        self.config = config or NavShellConfig()
        self.executor = executor or CommandExecutor()
        self.db = db
        self.session = SessionStore(home)
        self.aliases = self.config.alias_table()

        self.history = CommandHistory(
            max_size=self.config.history_size,
            entries=db.load_history() if db else None,
        )
        self.transcript: List[TranscriptLine] = (
            db.load_transcript(limit=self.config.transcript_limit) if db else []
        )
        self.busy = False

    @property
    def state(self) -> SessionState:
        return self.session.state

    def prompt_label(self) -> str:
        return self.state.prompt_label(self.config.prompt_depth, self.config.show_branch)

    async def start(self) -> SessionState:
        """
        Settle the initial state: canonical home directory and its branch.

        Previous directory stays empty, so `cd -` has nowhere to go yet.
        """
        home = self.session.home
        canonical = await probe(self.executor, plan_change("", self.state, home))
        directory = canonical or home
        branch = await self.query_branch(directory)
        self.session.commit(SessionState(current_directory=directory, branch_label=branch))
        return self.state

    async def submit(self, line: str) -> List[TranscriptLine]:
        """
        Process one input line to completion.

        Args:
            line: Raw text typed by the user

        Returns:
            Transcript lines produced by this submission

        Raises:
            SessionBusyError: A previous submission has not finished
        """
        if self.busy:
            raise SessionBusyError()

        raw = line.strip()
        if not raw:
            return []

        self.busy = True
        try:
            return await self._process(raw)
        finally:
            self.busy = False

    async def _process(self, raw: str) -> List[TranscriptLine]:
        self.history.record(raw)
        if self.db:
            self.db.save_history(self.history.entries)

        expanded = expand_alias(raw, self.aliases)
        if expanded == CLEAR_COMMAND:
            self.clear_transcript()
            return []

        state = self.state
        command = TranscriptLine(
            kind="command",
            text=f"$ {raw}",
            directory=state.current_directory,
            branch=state.branch_label,
        )

        started_at = datetime.now()
        started = time.monotonic()

        classification = classify(expanded, implicit_jump=self.config.implicit_jump)
        if isinstance(classification, (Shortcut, ExplicitChange)):
            lines, success = await self._change_directory(classification.target)
        elif isinstance(classification, ImplicitJump):
            outcome = await self._jump(classification.name)
            if outcome is None:
                outcome = await self._run_command(expanded)
            lines, success = outcome
        else:
            lines, success = await self._run_command(classification.command)

        produced = [command] + lines
        self._append(produced)

        if self.db:
            self.db.add_command_log(CommandLog(
                command=raw,
                directory=state.current_directory,
                started_at=started_at,
                duration_ms=(time.monotonic() - started) * 1000,
                success=success,
                output_lines=sum(len(out.text.splitlines()) for out in lines if out.kind == "output"),
            ))

        return produced

    async def _change_directory(self, target: str) -> Outcome:
        try:
            directory = await navigate(self.executor, target, self.state, self.session.home)
        except (NoPreviousDirectory, NavigationNotFound) as e:
            return [self._error(str(e))], False

        return await self._commit_navigation(directory), True

    async def _jump(self, name: str) -> Optional[Outcome]:
        """Try a bare word as a subdirectory; None means run it as a command."""
        state = self.state
        if not self.config.prefer_navigation and await is_invocable(self.executor, name, state):
            return None

        directory = await probe(self.executor, plan_change(name, state, self.session.home))
        if directory is None:
            return None

        return await self._commit_navigation(directory), True

    async def _run_command(self, command: str) -> Outcome:
        try:
            output = await self.executor.run(command_line(self.state, command))
        except CommandExecutionError as e:
            message = str(e).rstrip("\n")
            if not message:
                message = f"Command failed with exit code {e.returncode}"
            return [self._error(message)], False

        if self.config.strip_ansi:
            output = strip_ansi(output)
        text = output.rstrip("\n") or NO_OUTPUT
        return [TranscriptLine(kind="output", text=text)], True

    async def _commit_navigation(self, directory: str) -> List[TranscriptLine]:
        branch = await self.query_branch(directory)
        self.session.commit(self.session.navigated(directory, branch))

        if not self.config.announce_navigation:
            return []
        return [TranscriptLine(kind="output", text=f"Changed directory to: {directory}")]

    async def _read_branch(self, directory: str) -> str:
        try:
            output = await self.executor.run(chain(directory, BRANCH_QUERY))
        except CommandExecutionError as e:
            raise BranchQueryFailure(str(e).strip()) from e

        label = strip_ansi(output).strip()
        if not label:
            raise BranchQueryFailure("empty branch name")
        return label

    async def query_branch(self, directory: str) -> Optional[str]:
        """Branch label for `directory`, or None; failures are never reported."""
        if not self.config.show_branch:
            return None
        try:
            return await self._read_branch(directory)
        except BranchQueryFailure as e:
            logger.debug("no branch for %s: %s", directory, e)
            return None

    def _error(self, text: str) -> TranscriptLine:
        return TranscriptLine(kind="error", text=text)

    def _append(self, lines: List[TranscriptLine]) -> None:
        self.transcript.extend(lines)
        if self.db:
            for line in lines:
                self.db.append_transcript(line)

    def clear_transcript(self) -> None:
        self.transcript.clear()
        if self.db:
            self.db.clear_transcript()
