"""
Runs one shell command line in a fresh process.
Nothing survives between calls, so callers encode directory changes inline.
"""

import asyncio
import logging
import re
import shlex
from typing import Optional

from .errors import CommandExecutionError

logger = logging.getLogger(__name__)

_ANSI_PATTERNS = (
    re.compile(r"\x1B\[[0-9;]*[JKmsu]"),
    re.compile(r"\x1B\[[?]?[0-9;]*[a-zA-Z]"),
    re.compile(r"\x1B\][0-9];[^\x07]*\x07"),
)


def strip_ansi(text: str) -> str:
    """Remove colour codes, cursor movement and title sequences."""
    for pattern in _ANSI_PATTERNS:
        text = pattern.sub("", text)
    return text


def quote_path(path: str) -> str:
    """Quote a path for use in an `sh -c` command line."""
    return shlex.quote(path)


def chain(directory: Optional[str], command: str) -> str:
    """
    Prefix `command` with a change into `directory`.

    Args:
        directory: Directory to run in, or None to run wherever the process starts
        command: Shell command line

    Returns:
        A single command line using the `cd ... && ...` idiom
    """
    if not directory:
        return command
    return f"cd {quote_path(directory)} && {command}"


class CommandExecutor:
    """Executes command lines through the system shell."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.call_count = 0

    async def run(self, command: str) -> str:
        """
        Run `command` once and capture its output.

        Args:
            command: Shell command line

        Returns:
            Captured stdout

        Raises:
            CommandExecutionError: Non-zero exit (message is stderr, or stdout
                when stderr is empty) or the process could not be started
        """
        self.call_count += 1
        logger.debug("exec: %s", command)

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await process.communicate()
        except OSError as e:
            raise CommandExecutionError(str(e)) from e

        stdout = stdout_bytes.decode(self.encoding, errors="replace")
        stderr = stderr_bytes.decode(self.encoding, errors="replace")

        if process.returncode == 0:
            return stdout

        logger.debug("exit %s: %s", process.returncode, command)
        raise CommandExecutionError(stderr if stderr else stdout, process.returncode)
