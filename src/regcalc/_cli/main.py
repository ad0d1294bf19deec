import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, TextIO

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from regcalc._calculator import Calculator
from regcalc._operations import IllegalOperationError

from .config import ConfigError, RegcalcConfig, get_config
from .session import IllegalCommandError, QuitCommand, RecordCommand, parse_command, run_session

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console(soft_wrap=True)


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Register calculator with lazy evaluation."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> RegcalcConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


@contextmanager
def _open_script(script: Path) -> Iterator[TextIO]:
    try:
        f = script.open(encoding="utf-8")
    except FileNotFoundError as e:
        err_console.print(f"[red]Error, file not found:[/red] {escape(str(script))}")
        raise typer.Exit(code=1) from e
    with f:
        yield f


@app.command()
def run(
    script: Annotated[
        Path | None,
        typer.Argument(help="File with one command per line (reads standard input if omitted)"),
    ] = None,
    *,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--no-strict",
            help="Stop at the first illegal command or cycle and exit non-zero (defaults to the configured value)",
            show_default=False,
        ),
    ] = None,
) -> None:
    """Read commands and print the value of queried registers."""
    config = _load_config()
    script = script or config.script
    strict = config.strict if strict is None else strict

    calculator = Calculator()
    if script is None:
        logger.debug("Reading commands from standard input")
        summary = run_session(sys.stdin, calculator, out_console, err_console, strict=strict)
    else:
        logger.debug("Reading commands from %s", script)
        with _open_script(script) as lines:
            summary = run_session(lines, calculator, out_console, err_console, strict=strict)

    logger.debug(
        "Session finished: %d recorded, %d printed, %d errors",
        summary.recorded,
        summary.printed,
        summary.errors,
    )

    if strict and not summary.success:
        raise typer.Exit(code=1)


@app.command()
def check(  # noqa: C901
    script: Annotated[
        Path | None,
        typer.Argument(help="File with one command per line"),
    ] = None,
) -> None:
    """Check a command file for illegal lines and dependency cycles without evaluating it."""
    config = _load_config()
    script = script or config.script
    if script is None:
        err_console.print(f"[red]✗ No script given and no {escape('[tool.regcalc]')}.script configured[/red]")
        raise typer.Exit(code=2)

    err_console.print()
    err_console.print(f"[cyan]Checking script:[/cyan] {escape(str(script))}")
    err_console.print()

    calculator = Calculator()
    problems: list[tuple[int, str]] = []

    with _open_script(script) as lines:
        for lineno, line in enumerate(lines, start=1):
            try:
                command = parse_command(line)
            except IllegalCommandError as e:
                problems.append((lineno, str(e)))
                continue

            match command:
                case QuitCommand():
                    break
                case RecordCommand(term1, operator, term2):
                    try:
                        calculator.record_operation(term1, operator, term2)
                    except IllegalOperationError as e:
                        problems.append((lineno, str(e)))
                case _:
                    continue

    graph = calculator.dependency_graph()
    cyclic = graph.cycle_members()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Register", style="bold")
    table.add_column("Operations", justify="right", style="yellow")
    table.add_column("Depends on")
    table.add_column("Status")

    for register in calculator.log.sources():
        n_operations = sum(1 for _ in calculator.log.operations_for(register))
        dependencies = ", ".join(sorted(graph.predecessors(register)))
        if register in cyclic:
            status = "[red]✗ cycle[/red]"
        elif graph.ancestors(register) & cyclic:
            status = "[yellow]depends on cycle[/yellow]"
        else:
            status = "[green]✓ ok[/green]"
        table.add_row(register, str(n_operations), dependencies, status)

    err_console.print(
        Panel(
            table,
            title=f"[bold]Registers: {escape(script.name)}[/bold]",
            subtitle=f"[dim]{len(calculator.log)} operations[/dim]",
            border_style="cyan",
        ),
    )
    err_console.print()

    for lineno, message in problems:
        err_console.print(f"  [red]•[/red] line {lineno}: {escape(message)}")
    if cyclic:
        err_console.print(f"  [red]•[/red] registers on a cycle: {', '.join(sorted(cyclic))}")

    if problems or cyclic:
        err_console.print()
        err_console.print("[red]✗ Script has problems[/red]")
        err_console.print()
        raise typer.Exit(code=1)

    err_console.print("[green]✓ Script is valid[/green]")
    err_console.print()
