"""
Core application engine for orchestrating conversions.

The `ConversionManager` submits every input file, then drives the sessions
through parallel polling waves until each one has finished or failed. It
reports state changes to a `SessionObserver` and never writes to the terminal
itself.
"""

from .conversion_manager import ConversionManager
from .observer import SessionObserver

__all__ = ["ConversionManager", "SessionObserver"]
