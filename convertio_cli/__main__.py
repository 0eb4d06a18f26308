"""
Entry point for `convertio-cli` and `python -m convertio_cli`.

Typer already maps `typer.Exit`, aborts and Ctrl-C to exit codes, and the
`convert` command turns every ConvertioCliError into an error panel with exit
status 1. Anything that still escapes is a bug: it is shown as an
"Unexpected" panel and the process exits with status 1.
"""

import logging
import sys

from convertio_cli.cli.app import app, console
from convertio_cli.cli.formatters import format_error_with_suggestions

log = logging.getLogger("convertio_cli")


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
