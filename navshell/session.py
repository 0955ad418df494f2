"""
Session state management for NavShell.
Holds the virtual working directory for the lifetime of the process.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict


def short_path(path: str, depth: int = 3) -> str:
    """
    Shorten a path to its last `depth` parts.

    Both separators are accepted so Windows-style paths display the same way.
    """
    if not path:
        return ""
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    if not parts:
        return "/"
    return "/".join(parts[-depth:])


class SessionState(BaseModel):
    """Immutable snapshot of where the session is."""
    model_config = ConfigDict(frozen=True)

    current_directory: str
    previous_directory: Optional[str] = None
    branch_label: Optional[str] = None

    def prompt_label(self, depth: int = 3, show_branch: bool = True) -> str:
        """Label shown above the input line."""
        label = short_path(self.current_directory, depth)
        if show_branch and self.branch_label:
            label = f"{label} ({self.branch_label})"
        return label


class SessionStore:
    """Owns the current SessionState.

    The state is only ever swapped for a complete new snapshot, so readers
    never observe a half-applied navigation.
    """

    def __init__(self, home: Optional[str] = None):
        self.home: str = home or str(Path.home())
        self._state = SessionState(current_directory=self.home)

    @property
    def state(self) -> SessionState:
        return self._state

    def commit(self, new_state: SessionState) -> None:
        """Replace the current state."""
        self._state = new_state

    def navigated(self, directory: str, branch_label: Optional[str]) -> SessionState:
        """
        Build the state that results from a successful navigation.

        Args:
            directory: Verified absolute path of the new directory
            branch_label: Branch of the new directory, if any

        Returns:
            New snapshot; the current directory becomes the previous one
        """
        return SessionState(
            current_directory=directory,
            previous_directory=self._state.current_directory,
            branch_label=branch_label,
        )
