from __future__ import annotations

import base64
import binascii

from .errors import DecodeError

__all__ = [
    "encode_bytes",
    "decode_text",
]


def encode_bytes(data: bytes) -> str:
    """Encode raw bytes as standard (padded) base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_text(text: str) -> bytes:
    """Decode standard base64 text back into raw bytes.

    Characters outside the base64 alphabet and bad padding are rejected
    rather than silently discarded.

    Raises:
        DecodeError: with a "Base64 decode error: ..." message.
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except UnicodeEncodeError as e:
        raise DecodeError(f"Base64 decode error: non-ASCII input: {e}") from e
    except binascii.Error as e:
        raise DecodeError(f"Base64 decode error: {e}") from e
