"""
Pydantic models for structured data in NavShell.
"""

from datetime import datetime
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class TranscriptLine(BaseModel):
    """One line of the session transcript."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["command", "output", "error"]
    text: str
    # Only command lines carry these; they are captured at submission time
    directory: Optional[str] = None
    branch: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class CommandLog(BaseModel):
    """Timing and outcome of a single submission."""
    command: str
    directory: str
    started_at: datetime
    duration_ms: float
    success: bool
    output_lines: int = 0


# Classification variants produced by the path resolution engine

class Shortcut(BaseModel):
    """`..`, `...`, `~` or `-` typed on its own."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["shortcut"] = "shortcut"
    token: str
    target: str


class ExplicitChange(BaseModel):
    """`cd` with an optional target."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit_change"] = "explicit_change"
    target: str


class ImplicitJump(BaseModel):
    """A bare word that may name a subdirectory."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["implicit_jump"] = "implicit_jump"
    name: str


class OrdinaryCommand(BaseModel):
    """Anything else; sent to the executor."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["ordinary_command"] = "ordinary_command"
    command: str


Classification = Union[Shortcut, ExplicitChange, ImplicitJump, OrdinaryCommand]
