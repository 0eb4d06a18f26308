"""
Media File Layer.

This package is responsible for local file operations: reading input files
for upload and writing converted results to disk.
"""

from .writer import read_input_file, write_output_file

__all__ = ["read_input_file", "write_output_file"]
