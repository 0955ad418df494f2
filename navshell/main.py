"""
Main entry point for NavShell CLI.
Handles commands: init, start, aliases, history, clear-history, stats
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler
from rich.table import Table

from .config import ConfigManager, NavShellConfig
from .interface.console import console
from .interface.repl import show_aliases, show_stats, start_repl
from .memory.db import ShellDB
from .memory.history import CommandHistory

app = typer.Typer(help="NavShell: a persistent session over one-shot shell commands")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def init():
    """Write a default configuration file."""
    config_manager = ConfigManager()

    if config_manager.exists():
        console.print("[yellow]NavShell is already initialized.[/yellow]")
        console.print(f"[dim]Edit {config_manager.config_file} to change settings.[/dim]")
        return

    implicit_jump = typer.confirm("Jump into folders by typing their name?", default=True)

    config = NavShellConfig(implicit_jump=implicit_jump)
    config_manager.save(config)

    console.print("\n[green]✓[/green] NavShell initialized successfully!")
    console.print(f"[dim]Config saved to: {config_manager.config_file}[/dim]")
    console.print(f"\n[cyan]Configuration:[/cyan]")
    console.print(f"  • History size: {config.history_size}")
    console.print(f"  • Implicit jump: {config.implicit_jump}")
    console.print(f"  • Show branch: {config.show_branch}")
    console.print("\n[dim]Run 'nsh start' to begin![/dim]")


@app.command()
def start(
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Start here instead of the home directory"),
):
    """Start an interactive session."""
    config_manager = ConfigManager()
    config = config_manager.load_or_default()

    home = None
    if directory is not None:
        if not directory.is_dir():
            console.print(f"[red]Error:[/red] Not a directory: {directory}")
            raise typer.Exit(1)
        home = str(directory.resolve())

    start_repl(config, config_manager, home=home)


@app.command()
def aliases():
    """Show the alias table."""
    config = ConfigManager().load_or_default()
    show_aliases(config)


@app.command()
def history(limit: int = typer.Option(20, "--limit", "-n", help="Number of commands to show")):
    """Show recorded command history."""
    config_manager = ConfigManager()
    config = config_manager.load_or_default()

    db = ShellDB(config_manager.db_path(config))
    try:
        entries = CommandHistory(config.history_size, db.load_history()).recent(limit)
    finally:
        db.close()

    if not entries:
        console.print("[dim]No command history yet[/dim]")
        return

    table = Table(title="Command History", show_header=False, border_style="cyan")
    table.add_column("Command", style="white")
    for entry in entries:
        table.add_row(entry)
    console.print(table)


@app.command()
def clear_history():
    """Delete recorded command history."""
    config_manager = ConfigManager()
    config = config_manager.load_or_default()

    confirm = typer.confirm("Delete all recorded commands?", default=False)
    if not confirm:
        console.print("[dim]Cancelled.[/dim]")
        return

    db = ShellDB(config_manager.db_path(config))
    try:
        db.clear_history()
    finally:
        db.close()

    console.print("[green]✓[/green] History cleared")


@app.command()
def stats():
    """Show command statistics."""
    config_manager = ConfigManager()
    config = config_manager.load_or_default()

    db = ShellDB(config_manager.db_path(config))
    try:
        show_stats(db)
    finally:
        db.close()


if __name__ == "__main__":
    app()
