"""
Exception types raised by the navigation engine and executor.
"""


class NavShellError(Exception):
    """Base class for NavShell errors."""


class NavigationNotFound(NavShellError):
    """Target directory is missing or not accessible."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"cd: {target}: No such file or directory")


class NoPreviousDirectory(NavShellError):
    """Back-navigation requested before any successful navigation."""

    def __init__(self):
        super().__init__("cd: OLDPWD not set")


class CommandExecutionError(NavShellError):
    """The process failed or could not be spawned.

    The message is the raw text reported by the process (stderr, falling back
    to stdout) or the spawn error.
    """

    def __init__(self, message: str, returncode: int = -1):
        self.returncode = returncode
        super().__init__(message)


class BranchQueryFailure(NavShellError):
    """Branch label could not be determined. Never shown to the user."""


class SessionBusyError(NavShellError):
    """A submission arrived while another one is still running."""

    def __init__(self):
        super().__init__("A command is already running")
