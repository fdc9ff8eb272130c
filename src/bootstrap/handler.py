from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import parse_qs

from state.models import SETTINGS_FLAGS_KEY, UNCATEGORIZED_KEY, Document, is_reserved_key
from state.serializer import DocumentSerializer
from state.settings import SETTINGS_DEFAULTS, SETTINGS_FLAGS, encode_settings


logger = logging.getLogger(__name__)

# Query parameter names
PARAM_CARDS = "cards"
PARAM_CATEGORIES = "categories"
PARAM_SAVED_STATE = "state"

QueryParams = Union[str, Mapping[str, Union[str, Sequence[str], None]], None]

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def _normalize_params(params: QueryParams) -> Dict[str, str]:
    """Flatten query parameters to name -> first value.

    Accepts a raw query string (with or without the leading '?'), a mapping of
    name -> str, or a mapping of name -> list of str.
    """
    if not params:
        return {}
    if isinstance(params, str):
        parsed = parse_qs(params.lstrip("?"), keep_blank_values=True)
        return {k: v[0] for k, v in parsed.items() if v}

    out: Dict[str, str] = {}
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, str):
            out[name] = value
        elif value:
            out[name] = str(value[0])
    return out


def _split_csv(raw: Optional[str]) -> List[str]:
    return [tok for tok in (raw or "").split(",") if tok]


def _parse_flag(raw: str) -> bool:
    """Permissive integer parse: leading digits count, anything else is False."""
    m = _INT_PREFIX_RE.match(raw)
    if not m:
        return False
    return int(m.group(1)) != 0


def load_from_query_parameters(params: QueryParams = None) -> Dict[str, Any]:
    """
    Build a raw document from page query parameters.

    - `cards`: comma-separated uncategorized items; empty segments dropped.
    - `categories`: comma-separated category names, each with no items.
    - `allowCategoryEditing`, `isRandomized`, `allowCardEditing`, `allowCardDup`:
      integer overrides of the default settings (nonzero = on).

    Never raises on malformed values; they degrade to False or are skipped.
    """
    values = _normalize_params(params)

    settings = dict(SETTINGS_DEFAULTS)
    for name in SETTINGS_FLAGS:
        raw = values.get(name)
        if raw is not None:
            settings[name] = _parse_flag(raw)

    data: Dict[str, Any] = {
        UNCATEGORIZED_KEY: _split_csv(values.get(PARAM_CARDS)),
        SETTINGS_FLAGS_KEY: encode_settings(settings),
    }
    for name in _split_csv(values.get(PARAM_CATEGORIES)):
        if is_reserved_key(name):
            logger.warning("Ignoring reserved category name in query: %r", name)
            continue
        data[name] = []
    return data


def run_once(
    params: QueryParams = None,
    *,
    saved: Optional[str] = None,
    serializer: Optional[DocumentSerializer] = None,
) -> Dict[str, Any]:
    """
    Resolve the document a page should start with.

    - If `saved` is given, it is decoded and validated (a corrupt snapshot
      raises CorruptDataError; a wrong shape raises InvalidDocumentError).
    - Otherwise the document is built from the query parameters.

    Returns: {"ok": True, "source": "saved"|"query", "document": raw, "state": str}.
    """
    serializer = serializer or DocumentSerializer.from_env()

    if saved:
        document = serializer.load_document(saved)
        source = "saved"
    else:
        document = Document.from_data(load_from_query_parameters(params))
        source = "query"

    raw = document.to_data()
    return {"ok": True, "source": source, "document": raw, "state": serializer.save(raw)}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """AWS Lambda entry resolving the starting document of a page request.

    Reads `multiValueQueryStringParameters` when present, else
    `queryStringParameters`. A saved snapshot is taken from the `state`
    parameter.

    Environment:
    - FLASHCARD_COMPRESSION_LEVEL (optional)
    """
    event = event or {}
    params = event.get("multiValueQueryStringParameters") or event.get("queryStringParameters") or {}
    saved = _normalize_params(params).get(PARAM_SAVED_STATE)
    return run_once(params, saved=saved)
