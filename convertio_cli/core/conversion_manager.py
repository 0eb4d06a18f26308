"""
The main orchestrator: submits conversions and polls them in parallel waves.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from rich.markup import escape

from convertio_cli.api.client import ConvertioAPIClient
from convertio_cli.exceptions import (
    DecodeError,
    LocalIOError,
    RemoteRejection,
    TransportError,
)
from convertio_cli.models.config import DEFAULT_POLL_INTERVAL
from convertio_cli.models.session import ConversionSession, SessionState
from convertio_cli.models.stats import ConversionStats

from .observer import SessionObserver

log = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ConversionManager:
    """Orchestrates the conversion of a batch of files."""

    def __init__(
        self,
        api_client: ConvertioAPIClient,
        observer: Optional[SessionObserver] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.api_client = api_client
        self.observer = observer or SessionObserver()
        self.poll_interval = poll_interval
        self.stats = ConversionStats()
        self._sleep = sleep
        self.active: List[ConversionSession] = []

    async def submit_all(
        self, source_paths: Iterable[str | Path], target_format: str
    ) -> List[ConversionSession]:
        """
        Starts a conversion for every input file at once.

        If any submission fails, the ones still in flight are cancelled and
        the first error is raised; nothing gets polled.
        """
        tasks = [
            asyncio.create_task(
                self.api_client.start_conversion(path, target_format)
            )
            for path in source_paths
        ]
        if not tasks:
            return []

        try:
            sessions = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for session in sessions:
            self.stats.submitted += 1
            self.stats.bytes_uploaded += session.input_size
            log.debug(f"Session {session.id} created for '{session.source_path}'.")
            self.observer.on_session_created(session)
        return list(sessions)

    async def poll_session(self, session: ConversionSession) -> None:
        """
        Polls one session once and applies the outcome.

        Service rejections, malformed payloads and local write failures end
        only this session. Transport errors propagate.
        """
        if session.state is SessionState.CREATED:
            session.mark_polling()

        try:
            status = await self.api_client.poll_status(session)
            if status.failed:
                self._fail(session, status.error)
            elif status.finished:
                output_path, size = await self.api_client.fetch_result(session)
                session.mark_finished(output_path, size)
                self.stats.record_output(output_path, size)
                log.info(
                    f"[green]✓ {escape(session.source_name)} → "
                    f"{escape(output_path.name)}[/green]"
                )
            else:
                session.update_progress(status.percent)
        except (RemoteRejection, DecodeError, LocalIOError) as e:
            self._fail(session, str(e))

    def _fail(self, session: ConversionSession, message: str) -> None:
        session.mark_failed(message)
        self.stats.record_failure(session.source_path, message)
        log.error(f"[red]✗ {escape(session.source_name)}: {escape(message)}[/red]")

    async def poll_wave(
        self, active: Sequence[ConversionSession]
    ) -> List[ConversionSession]:
        """
        Polls every active session concurrently and waits for all of them.

        Returns:
            The sessions that are still pending after the wave.
        """
        results = await asyncio.gather(
            *(self.poll_session(session) for session in active),
            return_exceptions=True,
        )
        self.stats.waves += 1

        for result in results:
            if isinstance(result, BaseException):
                raise result

        pending = []
        for session in active:
            if session.done:
                self.observer.on_session_finished(session)
            else:
                self.observer.on_session_updated(session)
                pending.append(session)
        log.debug(
            f"Wave {self.stats.waves}: {len(active) - len(pending)} done, "
            f"{len(pending)} pending."
        )
        return pending

    async def run(
        self, source_paths: Iterable[str | Path], target_format: str
    ) -> ConversionStats:
        """Converts every input file and returns the run's statistics."""
        self.active = await self.submit_all(source_paths, target_format)

        while self.active:
            self.active = await self.poll_wave(self.active)
            if self.active:
                await self._sleep(self.poll_interval)

        return self.stats
