"""
Data Models Layer.

This package contains the models that define the core data structures used
throughout the application: configuration, conversion sessions, API responses
and statistics.
"""

from .config import ConvertConfig
from .responses import ApiResponse, ConversionData, DownloadResponse
from .session import ConversionSession, ConversionStatus, SessionState
from .stats import ConversionStats

__all__ = [
    "ApiResponse",
    "ConversionData",
    "ConversionSession",
    "ConversionStats",
    "ConversionStatus",
    "ConvertConfig",
    "DownloadResponse",
    "SessionState",
]
