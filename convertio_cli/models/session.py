"""
The conversion session model: one input file's remote conversion lifecycle.
"""

import enum
from dataclasses import dataclass, field
from pathlib import Path

from convertio_cli.exceptions import InvalidTransitionError

FINISHED_STEP = "finish"


class SessionState(str, enum.Enum):
    CREATED = "created"
    POLLING = "polling"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionStatus:
    """The typed outcome of a single status poll."""

    finished: bool = False
    percent: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ConversionSession:
    """
    Tracks a single conversion job from submission until it finishes or fails.

    Sessions are mutated only through the transition methods below so that
    progress never decreases and a terminal session stays terminal.
    """

    id: str
    source_path: str
    target_format: str
    state: SessionState = SessionState.CREATED
    progress: int = 0
    error: str | None = None
    output_path: Path | None = None
    input_size: int = 0
    output_size: int = 0
    _id: str = field(init=False, repr=False, default="")

    def __post_init__(self):
        if not self.id:
            raise ValueError("A conversion session needs a non-empty id.")
        self._id = self.id

    def __setattr__(self, name, value):
        if name == "id" and getattr(self, "_id", ""):
            raise AttributeError("The id of a conversion session cannot change.")
        super().__setattr__(name, value)

    @property
    def done(self) -> bool:
        return self.state in (SessionState.FINISHED, SessionState.FAILED)

    @property
    def source_name(self) -> str:
        return Path(self.source_path).name

    def _ensure_active(self) -> None:
        if self.done:
            raise InvalidTransitionError(
                f"Session {self.id} is already {self.state.value}."
            )

    def mark_polling(self) -> None:
        self._ensure_active()
        self.state = SessionState.POLLING

    def update_progress(self, percent: int) -> None:
        """Records a non-terminal percentage, clamped to 0..99 and never lowered."""
        self._ensure_active()
        self.progress = max(self.progress, min(max(percent, 0), 99))

    def mark_finished(self, output_path: Path, output_size: int = 0) -> None:
        self._ensure_active()
        self.output_path = output_path
        self.output_size = output_size
        self.progress = 100
        self.state = SessionState.FINISHED

    def mark_failed(self, message: str) -> None:
        self._ensure_active()
        self.error = message
        self.progress = 100
        self.state = SessionState.FAILED
