"""
Rich progress display for concurrent conversions.

The manager is a passive SessionObserver: it renders one bar per input file
from the session updates it receives and never changes session state.
"""

import asyncio

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from convertio_cli.core.observer import SessionObserver
from convertio_cli.models.session import ConversionSession
from convertio_cli.utils.formatting import shorten_name


class ProgressManager(SessionObserver):
    """Shows a progress bar per conversion and removes it once it reaches 100%."""

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled

        self.progress = Progress(
            SpinnerColumn(),
            TimeElapsedColumn(),
            BarColumn(bar_width=40),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            TextColumn("[progress.description]{task.description}", justify="left"),
            console=console,
            transient=False,
        )
        self._tasks: dict[str, TaskID] = {}

    @property
    def visible_count(self) -> int:
        return len(self._tasks)

    def on_session_created(self, session: ConversionSession) -> None:
        if not self.enabled:
            return
        description = (
            f"{escape(shorten_name(session.source_name))} "
            f"[dim]→ {session.target_format}[/dim]"
        )
        self._tasks[session.id] = self.progress.add_task(
            description, total=100, completed=session.progress
        )

    def on_session_updated(self, session: ConversionSession) -> None:
        task_id = self._tasks.get(session.id)
        if task_id is not None:
            self.progress.update(task_id, completed=session.progress)

    def on_session_finished(self, session: ConversionSession) -> None:
        task_id = self._tasks.get(session.id)
        if task_id is None:
            return
        self.progress.update(task_id, completed=session.progress)
        if session.progress == 100:
            self.progress.remove_task(task_id)
            del self._tasks[session.id]

    async def __aenter__(self):
        if self.enabled:
            self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            await asyncio.sleep(0.1)
            self.progress.stop()
