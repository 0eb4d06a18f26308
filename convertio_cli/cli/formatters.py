"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from convertio_cli.models.stats import ConversionStats
from convertio_cli.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "RemoteRejection": [
            "• The conversion service refused the request; see the message above.",
            "• Check that the output format is supported for this input type.",
            "• Verify your API key and remaining conversion minutes.",
        ],
        "TransportError": [
            "• The conversion service could not be reached.",
            "• Check your internet connection.",
            "• Increase `--timeout` for large files.",
        ],
        "DecodeError": [
            "• The service returned a corrupted result.",
            "• Please try the conversion again.",
        ],
        "LocalIOError": [
            "• Check that the input files exist and are readable.",
            "• Check that the output directory is writable.",
        ],
        "ConfigurationError": [
            "• Run `convertio-cli init <API_KEY>` to store your key.",
            "• Or set the CONVERTIO_API_KEY environment variable.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "api_key":
            value = "[hidden]" if value else "[not set]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            Text(content.strip()),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(stats: ConversionStats, console: Console | None = None):
    """Displays the final summary of a conversion run."""
    console = console or Console()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right", width=16)
    table.add_column(style="white", justify="left")

    table.add_row("✓ Converted:", f"[bold green]{stats.converted}[/bold green]")
    if stats.failed > 0:
        table.add_row("✗ Failed:", f"[bold red]{stats.failed}[/bold red]")
    table.add_row("Submitted:", str(stats.submitted))
    table.add_row("Uploaded:", format_size(stats.bytes_uploaded))
    table.add_row("Written:", format_size(stats.bytes_written))
    table.add_row("Poll waves:", str(stats.waves))
    table.add_row("Duration:", format_duration(stats.elapsed))

    border = "green" if stats.failed == 0 else "yellow"
    console.print(
        Panel(table, title="[bold]Conversion Summary[/bold]", border_style=border)
    )

    if stats.failures:
        failures = Table(title="Failed conversions", show_lines=False)
        failures.add_column("File", style="cyan")
        failures.add_column("Reason", style="red")
        for source, message in stats.failures.items():
            failures.add_row(Text(source), Text(message))
        console.print(failures)
