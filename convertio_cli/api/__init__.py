"""
Convertio API Layer.

This package handles all communication with the Convertio conversion API.
"""

from .client import ConvertioAPIClient

__all__ = ["ConvertioAPIClient"]
