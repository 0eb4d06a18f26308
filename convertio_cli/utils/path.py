"""
Utilities for deriving output paths from input files.
"""

from pathlib import Path
from typing import Iterable


def normalize_format(target_format: str) -> str:
    """Strips surrounding whitespace and a leading dot, and lower-cases the format."""
    return target_format.strip().lstrip(".").lower()


def output_path_for(source_path: str | Path, target_format: str) -> Path:
    """
    Returns the path the converted file is written to: the same directory as
    the input, with the input's extension replaced by the target format.
    """
    source = Path(source_path)
    return source.with_suffix(f".{normalize_format(target_format)}")


def find_output_collisions(
    source_paths: Iterable[str | Path], target_format: str
) -> dict[Path, list[str]]:
    """
    Groups inputs that would be written to the same output file, and inputs
    whose output file is the input itself.

    Returns:
        A mapping from each contested output path to the inputs that claim it.
    """
    claims: dict[Path, list[str]] = {}
    for source in source_paths:
        claims.setdefault(output_path_for(source, target_format), []).append(
            str(source)
        )
    return {
        path: sources
        for path, sources in claims.items()
        if len(sources) > 1 or path == Path(sources[0])
    }
