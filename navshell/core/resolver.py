"""
Path resolution engine.

Classifies an (alias-expanded) input line and resolves navigation by asking
the shell to perform the change and report where it ended up. Nothing here
mutates session state: `classify` and `plan_change` are pure, and `probe`
only reports what the shell saw.
"""

import re
import shlex
from typing import Optional

from .errors import CommandExecutionError, NavigationNotFound, NoPreviousDirectory
from .executor import CommandExecutor, chain, quote_path, strip_ansi
from .models import Classification, ExplicitChange, ImplicitJump, OrdinaryCommand, Shortcut
from ..session import SessionState

CD_KEYWORD = "cd"
HOME_TOKEN = "~"
BACK_TOKEN = "-"

_DOTS = re.compile(r"\.+")
# A leading "-" is a flag, never a folder name
_BARE_WORD = re.compile(r"[A-Za-z0-9._][A-Za-z0-9._-]*")
_ABSOLUTE = re.compile(r"(/|[A-Za-z]:[\\/])")


def shortcut_target(token: str) -> Optional[str]:
    """
    Map a shortcut token to the `cd` target it stands for.

    N dots go up N-1 levels, `~` goes home and `-` goes back.

    Returns:
        The equivalent target, or None if `token` is not a shortcut
    """
    if _DOTS.fullmatch(token):
        levels = len(token) - 1
        if levels == 0:
            return "."
        return "/".join([".."] * levels)
    if token in (HOME_TOKEN, BACK_TOKEN):
        return token
    return None


def is_absolute(target: str) -> bool:
    """Check for a leading separator or a drive-letter prefix."""
    return _ABSOLUTE.match(target) is not None


def parse_cd_target(line: str) -> str:
    """
    Extract the target of a `cd` line.

    One shell word is unquoted; anything that does not split into exactly
    one word is taken literally as a single path.
    """
    rest = line[len(CD_KEYWORD):].strip()
    if not rest:
        return ""

    try:
        words = shlex.split(rest)
    except ValueError:
        return rest

    if len(words) == 1:
        return words[0]
    if not words:
        return ""
    return rest


def classify(line: str, implicit_jump: bool = True) -> Classification:
    """
    Classify an alias-expanded input line.

    Precedence: shortcut, explicit `cd`, implicit jump, ordinary command.

    Args:
        line: Stripped, alias-expanded input
        implicit_jump: Whether bare words may be treated as folder names

    Returns:
        One of Shortcut, ExplicitChange, ImplicitJump or OrdinaryCommand
    """
    target = shortcut_target(line)
    if target is not None:
        return Shortcut(token=line, target=target)

    if line == CD_KEYWORD or line.startswith(CD_KEYWORD + " "):
        return ExplicitChange(target=parse_cd_target(line))

    if implicit_jump and _BARE_WORD.fullmatch(line):
        return ImplicitJump(name=line)

    return OrdinaryCommand(command=line)


def plan_change(target: str, state: SessionState, home: str) -> str:
    """
    Build the command line that verifies a directory change.

    The command performs the change and prints the canonical path, so a
    missing directory makes it fail and `..`, symlinks and trailing
    separators come back normalized.

    Args:
        target: `cd` target as typed (may be empty)
        state: Current session state
        home: Home directory

    Returns:
        Command line to hand to the executor

    Raises:
        NoPreviousDirectory: `-` with nothing recorded
    """
    if target in ("", HOME_TOKEN):
        return f"cd {quote_path(home)} && pwd -P"

    if target.startswith(HOME_TOKEN + "/"):
        rest = target[2:]
        if not rest:
            return f"cd {quote_path(home)} && pwd -P"
        return f"cd {quote_path(home)} && cd -- {quote_path(anchor(rest))} && pwd -P"

    if target == BACK_TOKEN:
        if not state.previous_directory:
            raise NoPreviousDirectory()
        return f"cd {quote_path(state.previous_directory)} && pwd -P"

    if is_absolute(target):
        return f"cd -- {quote_path(target)} && pwd -P"

    return f"cd {quote_path(state.current_directory)} && cd -- {quote_path(anchor(target))} && pwd -P"


def anchor(target: str) -> str:
    """
    Pin a relative target to the directory it is resolved from.

    `cd` consults CDPATH for operands that do not start with `.` or `/`, so
    `src` could land in some other tree; `./src` cannot.
    """
    if target in (".", "..") or target.startswith(("./", "../")):
        return target
    return "./" + target


async def probe(executor: CommandExecutor, command: str) -> Optional[str]:
    """
    Run a verification command once.

    Returns:
        The canonical absolute path printed last, or None if the change failed
    """
    try:
        output = await executor.run(command)
    except CommandExecutionError:
        return None

    lines = [line.strip() for line in strip_ansi(output).splitlines() if line.strip()]
    if not lines:
        return None
    return lines[-1]


async def navigate(executor: CommandExecutor, target: str, state: SessionState, home: str) -> str:
    """
    Resolve `target` to a verified absolute directory.

    Raises:
        NoPreviousDirectory: `-` with nothing recorded
        NavigationNotFound: The shell could not change into the target
    """
    command = plan_change(target, state, home)
    resolved = await probe(executor, command)
    if resolved is None:
        raise NavigationNotFound(target or HOME_TOKEN)
    return resolved


async def is_invocable(executor: CommandExecutor, name: str, state: SessionState) -> bool:
    """Check whether `name` resolves to a program, builtin or function."""
    command = chain(state.current_directory, f"command -v {shlex.quote(name)}")
    try:
        await executor.run(command)
    except CommandExecutionError:
        return False
    return True


def command_line(state: SessionState, command: str) -> str:
    """Prefix an ordinary command with a change into the current directory."""
    return chain(state.current_directory, command)
