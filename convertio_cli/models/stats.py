"""
Dataclass for tracking conversion run statistics.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ConversionStats:
    """Tracks the outcome of a conversion run."""

    submitted: int = 0
    converted: int = 0
    failed: int = 0
    bytes_uploaded: int = 0
    bytes_written: int = 0
    waves: int = 0
    outputs: list[Path] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_output(self, path: Path, size: int) -> None:
        self.converted += 1
        self.bytes_written += size
        self.outputs.append(path)

    def record_failure(self, source: str, message: str) -> None:
        self.failed += 1
        self.failures[source] = message

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time
