from __future__ import annotations

import pytest

from state.models import (
    RESERVED_KEYS,
    Document,
    InvalidDocumentError,
    ReservedKeyError,
    is_reserved_key,
)
from state.settings import Settings


def test_empty_document_uses_default_settings():
    doc = Document.empty()
    assert doc.flags == 1
    assert doc.uncategorized == []
    assert doc.categories == {}
    assert doc.settings == Settings.defaults()
    assert doc.to_data() == {"#": [], "?": 1}


def test_reserved_keys():
    assert RESERVED_KEYS == {"?", "#"}
    assert is_reserved_key("?")
    assert is_reserved_key("#")
    assert not is_reserved_key("Verbs")


def test_from_data_roundtrip_keeps_order():
    raw = {"#": ["a", "b"], "?": 5, "Nouns": ["dog", "cat"], "Verbs": []}
    doc = Document.from_data(raw)
    assert list(doc.categories) == ["Nouns", "Verbs"]
    assert doc.categories["Nouns"] == ["dog", "cat"]
    assert doc.to_data() == raw
    assert doc.settings.allowCardEditing is True
    assert doc.settings.isRandomized is False


@pytest.mark.parametrize(
    "raw",
    [
        [],
        "text",
        {},
        {"#": []},
        {"?": 1},
        {"#": [], "?": "1"},
        {"#": [], "?": True},
        {"#": [], "?": -1},
        {"#": "a,b", "?": 1},
        {"#": [1, 2], "?": 1},
        {"#": [], "?": 1, "Nouns": "dog"},
    ],
)
def test_from_data_rejects_bad_shapes(raw):
    with pytest.raises(InvalidDocumentError):
        Document.from_data(raw)


def test_apply_settings_updates_flags():
    doc = Document.empty()
    doc.apply_settings(Settings(allowCategoryEditing=False, isRandomized=True, allowCardDup=True))
    assert doc.flags == 2 | 8
    assert doc.settings.allowCardDup is True


def test_add_category_and_items():
    doc = Document.empty()
    doc.add_item("loose")
    doc.add_item("dog", category="Nouns")
    doc.add_category("Nouns").append("cat")
    doc.add_category("Verbs")
    assert doc.to_data() == {"#": ["loose"], "?": 1, "Nouns": ["dog", "cat"], "Verbs": []}


@pytest.mark.parametrize("name", ["?", "#", ""])
def test_add_category_rejects_reserved_names(name):
    doc = Document.empty()
    with pytest.raises(ReservedKeyError):
        doc.add_category(name)
    with pytest.raises(ReservedKeyError):
        doc.add_item("x", category=name)


def test_constructor_rejects_reserved_category():
    with pytest.raises(ValueError):
        Document(categories={"#": []})
