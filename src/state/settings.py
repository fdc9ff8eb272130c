from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Bit positions are a wire contract: never move an existing flag, new flags
# take the next unused power of two.
SETTINGS_FLAGS: Mapping[str, int] = MappingProxyType(
    {
        "allowCategoryEditing": 1,
        "isRandomized": 2,
        "allowCardEditing": 4,
        "allowCardDup": 8,
    }
)

SETTINGS_DEFAULTS: Mapping[str, bool] = MappingProxyType(
    {
        "allowCardEditing": False,
        "allowCardDup": False,
        "allowCategoryEditing": True,
        "isRandomized": False,
    }
)


class Settings(BaseModel):
    """
    Boolean settings of a flashcard document.

    Field names match the flag names used in the bit table and in query
    parameters. Extra flag names (e.g., written by a newer client) are kept
    on the model but never encoded.
    """

    model_config = ConfigDict(extra="allow")

    allowCategoryEditing: bool = Field(default=SETTINGS_DEFAULTS["allowCategoryEditing"])
    isRandomized: bool = Field(default=SETTINGS_DEFAULTS["isRandomized"])
    allowCardEditing: bool = Field(default=SETTINGS_DEFAULTS["allowCardEditing"])
    allowCardDup: bool = Field(default=SETTINGS_DEFAULTS["allowCardDup"])

    @classmethod
    def defaults(cls) -> "Settings":
        return cls(**SETTINGS_DEFAULTS)


SettingsLike = Union[Settings, Mapping[str, Any]]


def decode_settings(flags: Optional[int]) -> Settings:
    """Unpack a flags integer into Settings.

    Every flag in the bit table is recomputed from `flags`, so a clear bit
    yields False even where the default is True. Unknown bits are ignored.
    """
    bits = int(flags or 0)
    values = dict(SETTINGS_DEFAULTS)
    for name, bit in SETTINGS_FLAGS.items():
        values[name] = bool(bits & bit)
    return Settings(**values)


def encode_settings(settings: SettingsLike) -> int:
    """Pack Settings (or a name -> bool mapping) into a flags integer.

    Names missing from the bit table are ignored.
    """
    if isinstance(settings, BaseModel):
        items = settings.model_dump().items()
    else:
        items = settings.items()

    flags = 0
    for name, enabled in items:
        if enabled:
            flags |= SETTINGS_FLAGS.get(name, 0)
    return flags
