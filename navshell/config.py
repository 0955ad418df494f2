"""
Configuration loader for NavShell.
Handles aliases, navigation behaviour and storage settings.
"""

import json
from pathlib import Path
from typing import Dict, Mapping, Optional
from pydantic import BaseModel, Field

from .core.aliases import build_alias_table


class NavShellConfig(BaseModel):
    """Configuration model for NavShell."""
    history_size: int = Field(default=1000, ge=1)
    aliases: Dict[str, str] = Field(default_factory=dict)  # User aliases, merged over defaults

    # Navigation
    implicit_jump: bool = True  # Typing a folder name changes into it
    prefer_navigation: bool = True  # Folder wins over a program with the same name
    announce_navigation: bool = True

    # Display
    show_branch: bool = True
    strip_ansi: bool = True
    prompt_depth: int = Field(default=3, ge=1)
    transcript_limit: int = 500  # Lines restored at startup

    db_path: Optional[str] = None  # Defaults to <config dir>/navshell.db

    def alias_table(self) -> Mapping[str, str]:
        """Default aliases with user aliases applied on top."""
        return build_alias_table(self.aliases)


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_dir: Path = Path.home() / ".navshell"):
        self.config_dir = config_dir
        self.config_file = config_dir / "config.json"

    def load(self) -> Optional[NavShellConfig]:
        """Load configuration from disk."""
        if not self.config_file.exists():
            return None

        with open(self.config_file, 'r') as f:
            data = json.load(f)

        return NavShellConfig(**data)

    def load_or_default(self) -> NavShellConfig:
        return self.load() or NavShellConfig()

    def save(self, config: NavShellConfig) -> None:
        """Save configuration to disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, 'w') as f:
            json.dump(config.model_dump(), f, indent=2)

    def exists(self) -> bool:
        """Check if config exists."""
        return self.config_file.exists()

    def db_path(self, config: NavShellConfig) -> str:
        """Resolve where the durable store lives."""
        return config.db_path or str(self.config_dir / "navshell.db")
