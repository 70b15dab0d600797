from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .commands import CommandResult
from .config import ConfigManager, TodoSettings
from .todo_store import TodoStoreError
from .tools import Registry, register

app = typer.Typer(add_completion=False, help="Manage a markdown TODO checklist")
console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    settings: TodoSettings
    registry: Optional[Registry] = None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()  # type: ignore[misc]
def main(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(
        None, "--file", "-f", help="TODO markdown file; defaults to config or TODO_MD_FILE"
    ),
    section: Optional[str] = typer.Option(
        None, help="Section header new items are inserted under"
    ),
    brain_log: Optional[bool] = typer.Option(
        None, "--brain-log/--no-brain-log", help="Record changes in the memory log"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Manage a markdown TODO checklist."""
    _configure_logging(verbose)
    settings = ConfigManager().todo_settings(
        todo_file=file, section_header=section, brain_log=brain_log
    )
    ctx.obj = CliState(settings=settings)


def _registry(ctx: typer.Context) -> Registry:
    state: CliState = ctx.obj
    if state.registry is not None:
        return state.registry

    registry = Registry()
    try:
        commands = register(registry, state.settings)
    except TodoStoreError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    if commands is None:
        console.print("[yellow]TODO commands are disabled in the configuration.[/yellow]")
        raise typer.Exit(1)
    state.registry = registry
    return registry


def _run(ctx: typer.Context, name: str, args: str = "") -> None:
    registry = _registry(ctx)
    try:
        result: CommandResult = asyncio.run(registry.run_command(name, args))
    except TodoStoreError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(result.text, markup=False, highlight=False, soft_wrap=True)


@app.command("list")  # type: ignore[misc]
def list_cmd(ctx: typer.Context) -> None:
    """List open TODO items."""
    _run(ctx, "todo-list")


@app.command()  # type: ignore[misc]
def add(
    ctx: typer.Context,
    text: List[str] = typer.Argument(..., help="Text of the new item"),
) -> None:
    """Add a TODO item."""
    _run(ctx, "todo-add", " ".join(text))


@app.command()  # type: ignore[misc]
def done(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="1-based index from `list`"),
) -> None:
    """Mark a TODO item done."""
    _run(ctx, "todo-done", str(index))


@app.command()  # type: ignore[misc]
def edit(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="1-based index from `list`"),
    text: List[str] = typer.Argument(..., help="New text for the item"),
) -> None:
    """Replace the text of a TODO item."""
    _run(ctx, "todo-edit", f"{index} {' '.join(text)}")


@app.command()  # type: ignore[misc]
def remove(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="1-based index from `list`"),
) -> None:
    """Remove a TODO item."""
    _run(ctx, "todo-remove", str(index))


@app.command()  # type: ignore[misc]
def status(
    ctx: typer.Context,
    limit: int = typer.Option(50, min=1, max=200, help="Maximum open items to show"),
) -> None:
    """Print open/done counts and open items as JSON."""
    registry = _registry(ctx)
    try:
        data = asyncio.run(registry.execute_tool("todo_status", {"limit": limit}))
    except TodoStoreError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print_json(json.dumps(data, ensure_ascii=False))


config_app = typer.Typer(help="Show or change persisted settings")
app.add_typer(config_app, name="config")


@config_app.command("show")  # type: ignore[misc]
def config_show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    state: CliState = ctx.obj
    console.print_json(state.settings.model_dump_json())


@config_app.command("set")  # type: ignore[misc]
def config_set(
    key: str = typer.Argument(..., help="Setting name, e.g. maxListItems"),
    value: str = typer.Argument(..., help="JSON value; plain text is stored as a string"),
) -> None:
    """Persist a setting in the config file."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    manager = ConfigManager()
    manager.set(key, parsed)
    console.print(
        f"Set {key} = {json.dumps(parsed, ensure_ascii=False)} in {manager.config_file_path}",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


if __name__ == "__main__":
    app()
