"""
Flashcard document state and its string snapshots.

This package defines the settings bit-field codec, the in-memory document
schema, and the serializer that turns a document into a compact URL-safe
string and back.
"""

from .models import Document, InvalidDocumentError, ReservedKeyError
from .serializer import DocumentSerializer, load_from_string, save_to_string
from .settings import Settings, decode_settings, encode_settings

__all__ = [
    "Document",
    "DocumentSerializer",
    "InvalidDocumentError",
    "ReservedKeyError",
    "Settings",
    "decode_settings",
    "encode_settings",
    "load_from_string",
    "save_to_string",
]
