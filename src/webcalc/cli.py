"""
Command-line interface for WebCalc.

Provides commands for:
- Running the API server
- Replaying button presses through the calculator engine
- Showing the effective configuration
"""

from typing import List

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="webcalc",
    help="WebCalc - Server-rendered calculator service",
    add_completion=False,
)

console = Console()


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
    workers: int = typer.Option(None, "--workers", "-w", help="Number of workers"),
):
    """Start the WebCalc API server."""
    import uvicorn
    from webcalc.config import settings

    host = host or settings.host
    port = port or settings.port
    workers = workers or settings.workers

    if workers > 1:
        console.print("[yellow]Calculator state is per process; users may land on different workers[/]")

    console.print(f"[bold green]Starting WebCalc server on {host}:{port}[/]")

    uvicorn.run(
        "webcalc.api:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
    )


# =============================================================================
# Calculator Commands
# =============================================================================

@app.command()
def press(
    buttons: List[str] = typer.Argument(..., help="Buttons to press, e.g. 5 + 3 ="),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print the state after every press"),
):
    """Press a sequence of buttons on a fresh calculator."""
    from webcalc.config import configure_logging
    from webcalc.engine import press as press_button
    from webcalc.evaluator import format_number
    from webcalc.models import CalculatorState

    configure_logging("DEBUG" if verbose else "CRITICAL")

    state = CalculatorState()
    outcome = None
    for button in buttons:
        outcome = press_button(state, button)
        state = outcome.state
        if verbose:
            console.print(f"  [cyan]{button:>9}[/] -> {state.combined_display or '-'}  [dim]({state.display})[/]")

    table = Table(title="Calculator")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Display", state.display)
    table.add_row("Expression", state.combined_display or "-")
    table.add_row("Result", format_number(state.result))
    table.add_row("Operation", state.operation.value or "-")
    table.add_row("New input", "✓" if state.is_new_input else "✗")
    console.print(table)

    if outcome is not None and not outcome.success:
        console.print(f"[red]Error: {outcome.error}[/]")
        raise typer.Exit(1)


@app.command()
def config():
    """Show the effective configuration."""
    from webcalc.config import settings

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)


if __name__ == "__main__":
    app()
