"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from convertio_cli import __version__
from convertio_cli.api.client import ConvertioAPIClient
from convertio_cli.core.conversion_manager import ConversionManager
from convertio_cli.exceptions import ConfigurationError, ConvertioCliError
from convertio_cli.models.config import ConvertConfig
from convertio_cli.models.stats import ConversionStats
from convertio_cli.storage.config_manager import ConfigManager
from convertio_cli.utils.path import find_output_collisions

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_summary_panel,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("convertio_cli")

app = typer.Typer(
    name="convertio-cli",
    help=(
        "Convert local files through the Convertio API. Use 'convertio-cli"
        " <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "convertio-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Convertio CLI"""
    if version:
        console.print(f"[bold]convertio-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("convertio_cli").setLevel(log_level)

    if show_config:
        try:
            config_data = ConfigManager(CONFIG_FILE).read_settings()
        except ConfigurationError as e:
            console.print(format_error_with_suggestions(e))
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    api_key: str = typer.Argument(..., help="Your Convertio API key."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing key without asking."
    ),
):
    """Store the Convertio API key in the configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite the key?")
    ):
        raise typer.Abort()

    config_manager = ConfigManager(CONFIG_FILE)
    try:
        settings = config_manager.read_settings()
        settings["api_key"] = api_key.strip()
        config_manager.save_new_config(settings)
    except ConfigurationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )
    console.print(
        "Ready to convert! Try: [cyan]convertio-cli convert -f pdf <FILE>[/cyan]"
    )


async def run_conversions(
    config: ConvertConfig, show_progress: bool = True
) -> ConversionStats:
    """Runs one batch of conversions described by a validated configuration."""
    async with ConvertioAPIClient(
        config.api_key, config.base_url, config.request_timeout
    ) as api_client:
        async with ProgressManager(
            console=console, enabled=show_progress
        ) as progress_manager:
            manager = ConversionManager(
                api_client,
                observer=progress_manager,
                poll_interval=config.poll_interval,
            )
            return await manager.run(config.input_files, config.output_format)


@app.command(name="convert")
def convert_command(
    inputs: list[str] = typer.Argument(  # noqa: B008
        ..., help="One or more local files to convert.", metavar="INPUT..."
    ),
    output_format: str = typer.Option(
        ..., "-f", "--format", help="Output format to convert to, e.g. 'pdf'."
    ),
    interval: float | None = typer.Option(
        None,
        "--interval",
        help="Seconds to wait between status polls (default 2, override config).",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Total timeout in seconds for each HTTP request."
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Override the Convertio API endpoint."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Do not draw progress bars."
    ),
):
    """Convert one or more files to another format."""
    unique_inputs = list(dict.fromkeys(inputs))
    if len(unique_inputs) < len(inputs):
        log.info(f"Removed {len(inputs) - len(unique_inputs)} duplicate inputs.")

    cli_options = {
        key: value
        for key, value in {
            "input_files": unique_inputs,
            "output_format": output_format,
            "poll_interval": interval,
            "request_timeout": timeout,
            "base_url": base_url,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
    except ConfigurationError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    if not config.output_format:
        console.print("[red]✗ The output format cannot be empty.[/red]")
        raise typer.Exit(code=1)

    if collisions := find_output_collisions(config.input_files, config.output_format):
        for output_path, sources in collisions.items():
            if len(sources) == 1:
                message = f"{sources[0]} would be overwritten by its own output"
            else:
                message = (
                    f"{', '.join(sources)} would all be written to '{output_path}'"
                )
            console.print(f"[red]✗ {escape(message)}.[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[bold cyan]Converting {len(config.input_files)} file(s) to "
        f"{config.output_format}...[/bold cyan]"
    )

    try:
        stats = asyncio.run(run_conversions(config, show_progress=not no_progress))
    except ConvertioCliError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, console)
