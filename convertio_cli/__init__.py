"""
convertio-cli: convert local files through the Convertio API from the terminal.
"""

__version__ = "0.1.0"
