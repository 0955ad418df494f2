"""
Alias expansion for the leading token of an input line.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional


DEFAULT_ALIASES: Dict[str, str] = {
    "ll": "ls -la",
    "la": "ls -la",
    "l": "ls -lh",
    "ls": "ls --color=auto",
    "md": "mkdir",
    "rd": "rmdir",
    "cls": "clear",
    "c": "clear",
    "gs": "git status",
    "ga": "git add",
    "gc": "git commit",
    "gp": "git push",
    "gl": "git log",
}


def build_alias_table(overrides: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """
    Build a read-only alias table.

    Args:
        overrides: User aliases; these replace defaults with the same key

    Returns:
        Immutable mapping of token to expansion
    """
    table = dict(DEFAULT_ALIASES)
    if overrides:
        table.update(overrides)
    return MappingProxyType(table)


def expand_alias(line: str, table: Mapping[str, str]) -> str:
    """
    Expand the first token of `line` if it is an alias.

    The expansion is not expanded again, and everything after the first
    whitespace boundary is re-appended unchanged.

    Args:
        line: Input line (already stripped)
        table: Alias table

    Returns:
        The expanded line, or `line` itself when no alias applies
    """
    parts = line.split(None, 1)
    if not parts:
        return line

    expansion = table.get(parts[0])
    if expansion is None:
        return line

    if len(parts) > 1:
        return f"{expansion} {parts[1]}"
    return expansion
