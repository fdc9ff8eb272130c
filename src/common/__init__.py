"""
Common utilities for the flashcard state layer.

Modules:
- transcoder: deflate + URL-safe base64 text transform for arbitrary bytes
"""

__all__ = [
    "transcoder",
]
