"""
Shared fixtures for NavShell tests.
"""

from pathlib import Path
from typing import Callable, List

import pytest

from navshell.config import NavShellConfig
from navshell.core.executor import CommandExecutor
from navshell.core.orchestrator import Orchestrator


class FakeExecutor(CommandExecutor):
    """Executor that records command lines and answers through a handler."""

    def __init__(self, handler: Callable[[str], str]):
        super().__init__()
        self.handler = handler
        self.commands: List[str] = []

    async def run(self, command: str) -> str:
        self.commands.append(command)
        return self.handler(command)


@pytest.fixture
def home(tmp_path) -> Path:
    """A resolved temporary home directory."""
    directory = tmp_path / "home"
    directory.mkdir()
    return directory.resolve()


@pytest.fixture
def quiet_config() -> NavShellConfig:
    """Config without branch queries, so tests do not depend on git."""
    return NavShellConfig(show_branch=False)


@pytest.fixture
def orchestrator(home, quiet_config) -> Orchestrator:
    """Orchestrator backed by the real shell, rooted at `home`."""
    return Orchestrator(config=quiet_config, home=str(home))
