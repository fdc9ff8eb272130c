from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping, Optional, Union

from common.transcoder import DEFAULT_COMPRESSION_LEVEL, CorruptDataError, from_text, to_text

from .models import Document


logger = logging.getLogger(__name__)

# Environment variable names for convenience configuration
ENV_COMPRESSION_LEVEL = "FLASHCARD_COMPRESSION_LEVEL"

DocumentLike = Union[Document, Mapping[str, Any]]


def _dump_document_json(document: DocumentLike) -> bytes:
    # Compact JSON; key order kept so categories come back in the same order
    raw = document.to_data() if isinstance(document, Document) else dict(document)
    return json.dumps(raw, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _load_document_json(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


class DocumentSerializer:
    """
    String snapshots of flashcard documents.

    Wire format:
        urlsafe_base64( zlib( utf8( json(document) ) ) )

    Usage
    - `save(document)` returns the URL-safe snapshot string.
    - `load(text)` returns the decoded raw object without shape checks.
    - `load_document(text)` additionally validates it into a `Document`.

    Environment variables (optional)
    - `FLASHCARD_COMPRESSION_LEVEL`: zlib level, -1 (default) through 9
    """

    def __init__(self, *, compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
        if not -1 <= compression_level <= 9:
            raise ValueError("compression_level must be between -1 and 9")
        self._level = compression_level

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls) -> "DocumentSerializer":
        raw = os.environ.get(ENV_COMPRESSION_LEVEL)
        if raw in (None, ""):
            return cls()
        try:
            return cls(compression_level=int(raw))
        except ValueError as ex:
            raise RuntimeError(f"Invalid value for {ENV_COMPRESSION_LEVEL}: {raw!r}") from ex

    @property
    def compression_level(self) -> int:
        return self._level

    # -------- Core operations --------
    def save(self, document: DocumentLike) -> str:
        return to_text(_dump_document_json(document), level=self._level)

    def load(self, text: str) -> Any:
        """Decode a snapshot string back into its raw object.

        Raises:
        - CorruptDataError if the text cannot be decoded, decompressed or
          parsed as JSON. Nothing partial is ever returned.
        """
        try:
            payload = from_text(text)
        except CorruptDataError as ex:
            logger.debug("Rejected state snapshot: %s", ex)
            raise

        try:
            return _load_document_json(payload)
        except ValueError as ex:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors
            logger.debug("Rejected state snapshot JSON: %s", ex)
            raise CorruptDataError("Failed to parse state JSON") from ex

    def load_document(self, text: str) -> Document:
        return Document.from_data(self.load(text))


# -------- Convenience top-level helpers --------
_default = DocumentSerializer()


def save_to_string(document: DocumentLike, *, serializer: Optional[DocumentSerializer] = None) -> str:
    return (serializer or _default).save(document)


def load_from_string(text: str, *, serializer: Optional[DocumentSerializer] = None) -> Any:
    return (serializer or _default).load(text)


def load_document_from_string(text: str, *, serializer: Optional[DocumentSerializer] = None) -> Document:
    return (serializer or _default).load_document(text)
