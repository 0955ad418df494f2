"""
Interactive REPL (Read-Eval-Print Loop) for NavShell.
Renders the transcript, wires arrow keys to history recall and handles
slash commands.
"""

import asyncio
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .console import console
from ..config import ConfigManager, NavShellConfig
from ..core.models import TranscriptLine
from ..core.orchestrator import Orchestrator
from ..memory.db import ShellDB, command_stats
from ..memory.history import CommandHistory

LINE_STYLES = {
    "command": "bold green",
    "output": "white",
    "error": "red",
}

REPL_COMMANDS = {"help", "h", "history", "aliases", "stats", "status", "clear", "cls", "exit", "quit"}


def format_line(line: TranscriptLine) -> Text:
    """
    Style one transcript line.

    Output is wrapped in Text rather than printed as markup, so brackets in
    command output are shown verbatim.
    """
    return Text(line.text, style=LINE_STYLES[line.kind])


def render_lines(lines: List[TranscriptLine], include_commands: bool = True):
    for line in lines:
        if line.kind == "command" and not include_commands:
            continue
        console.print(format_line(line))


def create_key_bindings(history: CommandHistory) -> KeyBindings:
    """Up/down recall through the history navigator."""
    bindings = KeyBindings()

    def _replace(buffer, text: str):
        buffer.document = Document(text, cursor_position=len(text))

    @bindings.add("up")
    def _recall_previous(event):
        buffer = event.current_buffer
        _replace(buffer, history.recall_previous(buffer.text))

    @bindings.add("down")
    def _recall_next(event):
        recalled = history.recall_next()
        if recalled is not None:
            _replace(event.current_buffer, recalled)

    return bindings


def show_startup_info(config: NavShellConfig, orchestrator: Orchestrator):
    """Display startup information."""
    console.print("[bold green]NavShell is ready![/bold green]", end=" ")
    console.print("[dim]Type /help for commands or 'exit' to quit.[/dim]\n")

    state = orchestrator.state
    info_lines = []
    info_lines.append(f"[cyan]Directory:[/cyan] {escape(state.current_directory)}")
    if state.branch_label:
        info_lines.append(f"[cyan]Branch:[/cyan] {escape(state.branch_label)}")
    info_lines.append(f"[cyan]History:[/cyan] {len(orchestrator.history.entries)} commands")

    if config.implicit_jump:
        winner = "folder" if config.prefer_navigation else "program"
        info_lines.append(f"[cyan]Implicit jump:[/cyan] ON [dim](name clash: {winner} wins)[/dim]")
    else:
        info_lines.append("[cyan]Implicit jump:[/cyan] [dim]OFF[/dim]")

    panel = Panel(
        "\n".join(info_lines),
        title="[bold]Session Info[/bold]",
        border_style="blue",
        padding=(1, 2)
    )
    console.print(panel)
    console.print()


def show_help():
    """Display help message with available commands."""
    help_table = Table(title="Available Commands", show_header=True, border_style="cyan")
    help_table.add_column("Command", style="cyan", no_wrap=True)
    help_table.add_column("Description", style="white")

    help_table.add_row("/help", "Show this help message")
    help_table.add_row("/history [n]", "Show the last n commands")
    help_table.add_row("/aliases", "Show the alias table")
    help_table.add_row("/stats", "Show command statistics")
    help_table.add_row("/clear", "Clear the transcript")
    help_table.add_row("<folder>", "Jump into a subdirectory without typing cd")
    help_table.add_row(".. / ... / ~ / -", "Up one, up two, home, back")
    help_table.add_row("exit or quit", "Exit NavShell")

    console.print(help_table)
    console.print("\n[dim]Tip: Up/Down recall previous commands[/dim]")


def show_aliases(config: NavShellConfig):
    table = Table(title="Aliases", show_header=True, border_style="cyan")
    table.add_column("Alias", style="cyan", no_wrap=True)
    table.add_column("Expands to", style="white")

    for alias, expansion in sorted(config.alias_table().items()):
        table.add_row(alias, expansion)

    console.print(table)


def show_history(history: CommandHistory, limit_arg: Optional[str]):
    """Display recent commands."""
    try:
        limit = int(limit_arg) if limit_arg else 10
    except ValueError:
        console.print(f"[red]✗ Invalid limit:[/red] {escape(limit_arg)}")
        return

    entries = history.recent(limit)
    if not entries:
        console.print("[dim]No command history yet[/dim]")
        return

    total = len(history.entries)
    for offset, entry in enumerate(entries):
        number = total - len(entries) + offset + 1
        console.print(Text.assemble((f"{number:>5}", "dim"), "  ", entry))


def show_stats(db: Optional[ShellDB]):
    """Display command statistics."""
    stats = command_stats(db.get_command_logs() if db else [])

    table = Table(title="Command Statistics", show_header=False, border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Commands", str(stats["count"]))
    table.add_row("Failures", str(stats["failures"]))
    table.add_row("Average Response", f"{stats['average_duration_ms']:.0f} ms")
    table.add_row("Last Minute", str(stats["commands_last_minute"]))

    console.print(table)


def is_repl_command(text: str) -> bool:
    """Slash commands only; `/usr/bin/env` and friends go to the shell."""
    if not text.startswith("/"):
        return False
    parts = text[1:].split(maxsplit=1)
    return bool(parts) and parts[0].lower() in REPL_COMMANDS


def handle_command(command: str, orchestrator: Orchestrator) -> bool:
    """
    Handle special REPL commands.

    Args:
        command: Command string (starts with /)
        orchestrator: Session orchestrator

    Returns:
        True if should continue REPL loop, False to exit
    """
    parts = command[1:].split(maxsplit=1)
    if not parts:
        show_help()
        return True

    cmd = parts[0].lower()
    arg = parts[1] if len(parts) > 1 else None

    if cmd in ["help", "h"]:
        show_help()

    elif cmd == "history":
        show_history(orchestrator.history, arg)

    elif cmd == "aliases":
        show_aliases(orchestrator.config)

    elif cmd in ["stats", "status"]:
        show_stats(orchestrator.db)

    elif cmd in ["clear", "cls"]:
        orchestrator.clear_transcript()
        console.clear()

    elif cmd in ["exit", "quit"]:
        return False

    else:
        console.print(f"[red]✗ Unknown command:[/red] /{escape(cmd)}")
        console.print("[dim]Type /help for available commands[/dim]")

    return True


async def run_repl(config: NavShellConfig, orchestrator: Orchestrator):
    """Read lines until the user exits."""
    await orchestrator.start()
    show_startup_info(config, orchestrator)
    render_lines(orchestrator.transcript)

    prompt_session = PromptSession(key_bindings=create_key_bindings(orchestrator.history))

    while True:
        console.print(Text(f"📁 {orchestrator.prompt_label()}", style="blue"))
        try:
            user_input = await prompt_session.prompt_async("$ ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        # Anything the user entered ends a browse, submitted or not
        orchestrator.history.reset()

        if user_input.strip().lower() in ['exit', 'quit']:
            break

        if not user_input.strip():
            continue

        if is_repl_command(user_input):
            if not handle_command(user_input, orchestrator):
                break
            continue

        try:
            with console.status("[dim]Processing...[/dim]"):
                lines = await orchestrator.submit(user_input)
        except Exception as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            continue

        if not lines and not orchestrator.transcript:
            console.clear()
            continue

        # The prompt already echoed the command itself
        render_lines(lines, include_commands=False)


def start_repl(config: NavShellConfig, config_manager: ConfigManager, home: Optional[str] = None):
    """
    Start the interactive session.

    Args:
        config: NavShell configuration
        config_manager: Used to locate the durable store
        home: Starting directory (defaults to the user's home)
    """
    db = ShellDB(config_manager.db_path(config))
    orchestrator = Orchestrator(config=config, db=db, home=home)

    try:
        asyncio.run(run_repl(config, orchestrator))
    finally:
        db.close()
        console.print("\n[bold blue]👋 Goodbye![/bold blue]")
