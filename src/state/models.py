from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError, field_validator

from .settings import SETTINGS_DEFAULTS, Settings, SettingsLike, decode_settings, encode_settings


# Reserved keys of the raw document object
SETTINGS_FLAGS_KEY = "?"
UNCATEGORIZED_KEY = "#"
RESERVED_KEYS = frozenset({SETTINGS_FLAGS_KEY, UNCATEGORIZED_KEY})


class InvalidDocumentError(ValueError):
    """Raised when decoded data does not have the shape of a Document."""


class ReservedKeyError(ValueError):
    """Raised when a category name would collide with a reserved key."""


def is_reserved_key(name: str) -> bool:
    return name in RESERVED_KEYS


def _check_category_name(name: str) -> str:
    if not name:
        raise ReservedKeyError("Category name must not be empty")
    if is_reserved_key(name):
        raise ReservedKeyError(f"Category name is reserved: {name!r}")
    return name


class Document(BaseModel):
    """
    Flashcard document: uncategorized items, named categories and settings.

    Raw form (what gets serialized):
        {"#": [...uncategorized...], "?": <flags int>, "<category>": [...], ...}

    Notes
    - `categories` keeps insertion order; item order is significant.
    - `flags` is the packed settings integer (see `state.settings`).
    """

    flags: StrictInt = Field(
        default_factory=lambda: encode_settings(SETTINGS_DEFAULTS),
        ge=0,
        description="Packed settings bit-field",
    )
    uncategorized: List[StrictStr] = Field(default_factory=list, description="Items with no category")
    categories: Dict[str, List[StrictStr]] = Field(
        default_factory=dict,
        description="Category name -> ordered items",
    )

    @field_validator("categories")
    @classmethod
    def _no_reserved_categories(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for name in value:
            _check_category_name(name)
        return value

    @classmethod
    def empty(cls) -> "Document":
        """Fresh document built from default settings."""
        return cls()

    @classmethod
    def from_data(cls, raw: Any) -> "Document":
        """Validate a decoded raw object and build a Document from it.

        Raises:
        - InvalidDocumentError if reserved keys are missing or values have the
          wrong types.
        """
        if not isinstance(raw, dict):
            raise InvalidDocumentError(f"Document must be an object, got {type(raw).__name__}")
        missing = [key for key in (UNCATEGORIZED_KEY, SETTINGS_FLAGS_KEY) if key not in raw]
        if missing:
            raise InvalidDocumentError(f"Document is missing reserved keys: {', '.join(missing)}")

        categories = {k: v for k, v in raw.items() if k not in RESERVED_KEYS}
        try:
            return cls(
                flags=raw[SETTINGS_FLAGS_KEY],
                uncategorized=raw[UNCATEGORIZED_KEY],
                categories=categories,
            )
        except ValidationError as ex:
            raise InvalidDocumentError(f"Invalid document: {ex}") from ex

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            UNCATEGORIZED_KEY: list(self.uncategorized),
            SETTINGS_FLAGS_KEY: self.flags,
        }
        for name, items in self.categories.items():
            data[name] = list(items)
        return data

    # -------- Settings --------
    @property
    def settings(self) -> Settings:
        return decode_settings(self.flags)

    def apply_settings(self, settings: SettingsLike) -> None:
        self.flags = encode_settings(settings)

    # -------- Editing --------
    def add_category(self, name: str) -> List[str]:
        """Create (or return) the item list of category `name`."""
        _check_category_name(name)
        return self.categories.setdefault(name, [])

    def add_item(self, text: str, category: Optional[str] = None) -> None:
        if category is None:
            self.uncategorized.append(text)
            return
        self.add_category(category).append(text)
