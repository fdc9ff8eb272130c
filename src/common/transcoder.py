from __future__ import annotations

import base64
import binascii
import zlib


DEFAULT_COMPRESSION_LEVEL = zlib.Z_DEFAULT_COMPRESSION

# Standard base64 alphabet -> URL-safe alphabet
_TO_WEB_SAFE = str.maketrans({"+": "-", "/": "_"})
_FROM_WEB_SAFE = str.maketrans({"-": "+", "_": "/"})


class CorruptDataError(ValueError):
    """Raised when a text snapshot cannot be turned back into bytes."""


def to_text(data: bytes, *, level: int = DEFAULT_COMPRESSION_LEVEL) -> str:
    """Compress `data` and encode it as URL-safe base64 text.

    The compressed stream is zlib-formatted (what `pako.deflate` emits), so
    snapshots produced here and by the browser decode the same way. Padding
    `=` characters are kept; `from_text` also accepts them stripped.
    """
    compressed = zlib.compress(bytes(data), level)
    encoded = base64.b64encode(compressed).decode("ascii")
    return encoded.translate(_TO_WEB_SAFE)


def from_text(text: str) -> bytes:
    """Invert `to_text`.

    Raises:
    - CorruptDataError if the text is not valid base64 or the compressed
      stream is malformed or truncated.
    """
    b64 = text.strip().translate(_FROM_WEB_SAFE)
    # URLs frequently lose trailing padding
    b64 += "=" * (-len(b64) % 4)
    try:
        compressed = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise CorruptDataError("Invalid base64 in state text") from ex

    try:
        return zlib.decompress(compressed)
    except zlib.error as ex:
        raise CorruptDataError("Failed to decompress state text") from ex
