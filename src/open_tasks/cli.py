#!/usr/bin/env python3
"""
Open Tasks CLI Entry Point

Bootstraps configuration, logging and the task registry, then exposes every
registered task as a subcommand of ``open-tasks`` (alias ``ot``).
"""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import OpenTasksConfig, load_config
from .context import ContextBuilder
from .errors import ConfigurationError, OpenTasksError
from .output import symbol
from .tasks import TaskRegistry
from .utils import configure_logging, write_error_report

RESERVED_COMMANDS = {"list", "help-task"}


@dataclass
class CLIState:
    """Global options shared by every subcommand of one invocation."""

    verbosity: Optional[str] = None
    output_dir: Optional[str] = None
    dry_run: bool = False
    in_memory: bool = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"open-tasks {__version__}")
        raise typer.Exit()


def create_app(
    registry: TaskRegistry,
    config: Optional[OpenTasksConfig] = None,
    cwd: Optional[Path] = None,
    console: Optional[Console] = None,
) -> typer.Typer:
    """Build the typer app for a populated registry."""
    config = config or OpenTasksConfig()
    cwd = Path(cwd) if cwd else Path.cwd()
    console = console or Console(no_color=not config.colors)
    builder = ContextBuilder(cwd, config, console=console)

    app = typer.Typer(
        name="open-tasks",
        help="Compose commands into tasks and keep every output as a reference",
        rich_markup_mode="rich",
        no_args_is_help=True,
    )

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show start and end lines"),
        summary: bool = typer.Option(False, "--summary", "-s", help="Show result cards"),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress messages"),
        output_dir: Optional[str] = typer.Option(
            None, "--dir", help="Output directory (default from config)"
        ),
        dry_run: bool = typer.Option(False, "--dry-run", help="Print commands instead of running them"),
        in_memory: bool = typer.Option(False, "--in-memory", help="Keep outputs in memory only"),
        log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level for stderr logging"),
        version: bool = typer.Option(
            False, "--version", callback=_version_callback, is_eager=True, help="Show version"
        ),
    ) -> None:
        """open-tasks: composable task CLI."""
        selected = [
            name
            for name, enabled in (("quiet", quiet), ("summary", summary), ("verbose", verbose))
            if enabled
        ]
        if len(selected) > 1:
            console.print(
                "[red]Error: --quiet, --summary and --verbose are mutually exclusive[/red]"
            )
            raise typer.Exit(code=1)

        if log_level:
            try:
                configure_logging(log_level, json_format=config.log_format == "json")
            except ValueError as e:
                raise typer.BadParameter(str(e), param_hint="--log-level") from None

        ctx.obj = CLIState(
            verbosity=selected[0] if selected else None,
            output_dir=output_dir,
            dry_run=dry_run,
            in_memory=in_memory,
        )

    @app.command("list")
    def list_tasks() -> None:
        """List available tasks."""
        table = Table(title="Available Tasks")
        table.add_column("Task", style="cyan")
        table.add_column("Description")
        for name in registry.list_tasks():
            table.add_row(name, registry.get(name).description)
        console.print(table)

    @app.command("help-task")
    def help_task(name: str = typer.Argument(..., help="Task name")) -> None:
        """Show description and examples of a task."""
        try:
            console.print(escape(registry.help_for(name)))
        except OpenTasksError as e:
            console.print(f"[red]{symbol(False)} {escape(str(e))}[/red]")
            raise typer.Exit(code=1)

    def run_task(task_name: str, args: List[str], state: CLIState) -> None:
        handler = registry.get(task_name)
        verbosity = state.verbosity or handler.default_verbosity or config.default_verbosity
        context = builder.build(
            task_name,
            output_dir=state.output_dir,
            verbosity=verbosity,
            dry_run=state.dry_run,
            in_memory=state.in_memory,
        )

        try:
            asyncio.run(registry.execute(task_name, args, context))
        except Exception as e:
            console.print(f"[red]{symbol(False)} Error:[/red] {escape(str(e))}")
            report = write_error_report(
                context.output_dir,
                e,
                {
                    "task": task_name,
                    "args": args,
                    "cwd": str(cwd),
                    "verbosity": context.verbosity.label,
                    "dry_run": state.dry_run,
                },
            )
            console.print(f"[dim]Error report: {escape(str(report))}[/dim]")
            raise typer.Exit(code=1)

    def make_task_command(task_name: str):
        def task_command(ctx: typer.Context) -> None:
            run_task(task_name, list(ctx.args), ctx.obj or CLIState())

        return task_command

    for name in registry.list_tasks():
        if name in RESERVED_COMMANDS:
            console.print(f"[yellow]Warning: task '{name}' shadows a built-in command and was skipped[/yellow]")
            continue
        app.command(
            name,
            help=registry.get(name).description,
            context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
        )(make_task_command(name))

    return app


def build_registry(config: OpenTasksConfig, cwd: Path) -> TaskRegistry:
    """Registry with the built-in tasks plus those found in the task directories."""
    registry = TaskRegistry()
    registry.register_builtins()
    for directory in config.custom_tasks_dirs:
        path = Path(directory).expanduser()
        registry.discover(path if path.is_absolute() else cwd / path)
    return registry


def main():
    """Main entry point for the open-tasks CLI."""
    cwd = Path.cwd()
    error_console = Console(stderr=True)

    try:
        config = load_config(cwd)
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)

    problems = config.validate()
    if problems:
        for problem in problems:
            error_console.print(f"[red]Configuration error:[/red] {escape(problem)}")
        sys.exit(1)

    configure_logging(config.log_level, json_format=config.log_format == "json")
    app = create_app(build_registry(config, cwd), config, cwd)
    app()


if __name__ == "__main__":
    main()
