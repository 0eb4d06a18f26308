"""
Transfer codec for file contents sent to and received from the conversion service.
"""

import base64
import binascii

from convertio_cli.exceptions import DecodeError


def encode(data: bytes) -> str:
    """Encodes raw file bytes as padded standard base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """
    Decodes base64 text produced by the service back into raw bytes.

    Line breaks and other whitespace are ignored; any other character outside
    the base64 alphabet, or a bad padding, raises DecodeError.
    """
    try:
        compact = "".join(text.split())
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError, TypeError, AttributeError) as e:
        raise DecodeError(f"Malformed base64 payload: {e}") from e
