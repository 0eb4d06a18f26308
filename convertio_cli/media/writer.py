"""
Async reading of input files and writing of converted output files.
"""

import logging
from pathlib import Path

import aiofiles

from convertio_cli.exceptions import LocalIOError

log = logging.getLogger(__name__)


async def read_input_file(source_path: str | Path) -> bytes:
    """Reads a whole input file into memory."""
    try:
        async with aiofiles.open(source_path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise LocalIOError(f"Could not read input file '{source_path}': {e}") from e
    log.debug(f"Read {len(data)} bytes from '{source_path}'.")
    return data


async def write_output_file(destination_path: str | Path, data: bytes) -> int:
    """
    Creates (or truncates) the destination file and writes the converted bytes.
    A file left incomplete by a failed write is removed.

    Returns:
        The number of bytes written.
    """
    created = False
    try:
        async with aiofiles.open(destination_path, "wb") as f:
            created = True
            await f.write(data)
    except OSError as e:
        if created:
            _remove_partial_output(Path(destination_path))
        raise LocalIOError(
            f"Could not write output file '{destination_path}': {e}"
        ) from e
    log.debug(f"Wrote {len(data)} bytes to '{destination_path}'.")
    return len(data)


def _remove_partial_output(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.warning(f"Could not remove incomplete output file '{path}': {e}")
