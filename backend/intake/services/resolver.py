"""
Field resolver: maps a loosely-structured form submission onto the
canonical fields of its FormDefinition.

Storefront forms have been rebuilt many times and the same answer has
arrived under many key names ("city", "location", "city_location", …).
Rather than each handler guessing, every form declares an ordered alias list
per canonical field and this module applies the same rules to all of them:

  1. Keys are matched case-insensitively.
  2. Aliases are tried in declared order; the first non-empty value wins.
  3. key_patterns (regexes on raw keys) are tried next, in input order.
  4. best_guess fields still empty fall back to the longest free-text answer
     nobody else claimed, and the raw key used is recorded.
  5. Declared defaults fill whatever is still empty.

Public API:
  coerce_truthy(value) -> bool
  stringify(value) -> str
  normalize_handle(value) -> str
  resolve(raw, form, submitted_at=None) -> CanonicalApplication
"""

import json
import logging
import re
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlsplit

from intake.models.forms import FieldKind, FieldSpec, FormDefinition
from intake.models.submission import CanonicalApplication, FieldValue

logger = logging.getLogger(__name__)

# Checkbox / consent values that mean "yes"
_TRUTHY_STRINGS = {"true", "on", "yes", "1", "y"}

# Pasted profile links: https://instagram.com/x, //instagram.com/x, instagram.com/x
_URL_LIKE_RE = re.compile(r"^((https?:)?//|(www\.)?instagram\.com\b)", re.IGNORECASE)
_HAS_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HANDLE_INVALID_CHARS_RE = re.compile(r"[^A-Za-z0-9._]")

# Minimum length for a whitespace-free value to count as a free-text answer
_BEST_GUESS_MIN_LENGTH = 40


# ---------------------------------------------------------------------------
# Value coercion helpers
# ---------------------------------------------------------------------------

def coerce_truthy(value: Any) -> bool:
    """
    Coerce a checkbox / consent value to bool.

    Examples:
        True, 1, "true", "on", "yes", "1", "y", " YES "  -> True
        False, 0, "", "false", "no", None, "off"         -> False

    A list (repeated form key) is truthy when any of its items is.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    if isinstance(value, list):
        return any(coerce_truthy(item) for item in value)
    return False


def stringify(value: Any) -> str:
    """
    Render a raw value as trimmed text.

    Examples:
        "  Jane  "        -> "Jane"
        None              -> ""
        True              -> "true"
        42                -> "42"
        ["Mon", "Tue"]    -> "Mon, Tue"
        {"a": 1}          -> '{"a": 1}'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return ", ".join(part for part in (stringify(item) for item in value) if part)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value).strip()


def normalize_handle(value: Optional[str]) -> str:
    """
    Normalise a social-media handle to "@name".

    Accepts "@name", "name", or a pasted profile URL (first path segment is
    used). Characters outside [A-Za-z0-9._] are dropped. Returns "" when
    nothing usable remains. Normalising an already-normalised handle returns
    it unchanged.

    Examples:
        "instagram.com/janedoe"                -> "@janedoe"
        "https://www.instagram.com/jane.doe/"  -> "@jane.doe"
        "@@jane doe!"                          -> "@janedoe"
        "@janedoe"                             -> "@janedoe"
        "@@@"                                  -> ""
    """
    text = (value or "").strip()
    if not text:
        return ""

    if _URL_LIKE_RE.match(text):
        if text.startswith("//"):
            candidate = "https:" + text
        elif _HAS_SCHEME_RE.match(text):
            candidate = text
        else:
            candidate = "https://" + text
        segments = [part for part in urlsplit(candidate).path.split("/") if part]
        if not segments:
            # A bare domain carries no handle.
            return ""
        text = segments[0]

    text = text.lstrip("@")
    text = _HANDLE_INVALID_CHARS_RE.sub("", text)
    return f"@{text}" if text else ""


def _normalize_value(spec: FieldSpec, value: Any) -> str:
    text = stringify(value)
    if spec.kind == FieldKind.HANDLE:
        return normalize_handle(text)
    return text


# ---------------------------------------------------------------------------
# Resolution steps
# ---------------------------------------------------------------------------

def _key_index(raw: dict[str, Any]) -> dict[str, str]:
    """Map lower-cased key -> original key. The first spelling seen wins."""
    index: dict[str, str] = {}
    for key in raw:
        index.setdefault(str(key).lower(), key)
    return index


def _resolve_field(
    raw: dict[str, Any],
    index: dict[str, str],
    spec: FieldSpec,
    consumed: set[str],
    excluded: set[str],
) -> tuple[Optional[str], FieldValue]:
    """
    Resolve one canonical field.

    Returns (raw_key_used, value); raw_key_used is None when nothing matched.
    """
    if spec.kind == FieldKind.BOOLEAN:
        for alias in spec.aliases:
            key = index.get(alias.lower())
            if key is not None and coerce_truthy(raw[key]):
                return key, True
        return None, False

    for alias in spec.aliases:
        key = index.get(alias.lower())
        if key is None:
            continue
        value = _normalize_value(spec, raw[key])
        if value:
            return key, value

    if spec.key_patterns:
        patterns = [re.compile(p, re.IGNORECASE) for p in spec.key_patterns]
        for key, raw_value in raw.items():
            if key in consumed or str(key).lower() in excluded:
                continue
            if not any(p.search(str(key)) for p in patterns):
                continue
            value = _normalize_value(spec, raw_value)
            if value:
                return key, value

    return None, ""


def _best_guess_key(
    raw: dict[str, Any],
    consumed: set[str],
    ignored: set[str],
) -> Optional[str]:
    """
    Pick the longest untouched free-text answer.

    Only string values that contain whitespace or are longer than 40
    characters qualify; keys already consumed or in the ignore set are
    skipped. Ties keep the earliest key.
    """
    best_key: Optional[str] = None
    best_length = 0
    for key, value in raw.items():
        if key in consumed or str(key).lower() in ignored:
            continue
        if not isinstance(value, str):
            continue
        text = value.strip()
        if not text:
            continue
        if len(text) > _BEST_GUESS_MIN_LENGTH or any(ch.isspace() for ch in text):
            if len(text) > best_length:
                best_key, best_length = key, len(text)
    return best_key


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def resolve(
    raw: Optional[dict[str, Any]],
    form: FormDefinition,
    submitted_at: Optional[datetime] = None,
) -> CanonicalApplication:
    """
    Map a RawInput mapping onto the canonical fields of form.

    Every declared field is present in the result: unresolved text fields
    are "", unresolved booleans are False.

    Args:
        raw:          Parsed request body.
        form:         Definition of the form being submitted.
        submitted_at: Receipt time, carried through for rendering.

    Returns:
        CanonicalApplication with values, the raw key behind each value, and
        the keys satisfied through the best-guess fallback.
    """
    raw = dict(raw or {})
    index = _key_index(raw)
    honeypots = {k.lower() for k in form.honeypot_keys}
    metadata = {k.lower() for k in form.metadata_keys}

    values: dict[str, FieldValue] = {}
    sources: dict[str, str] = {}
    consumed: set[str] = set()

    for spec in form.fields:
        key, value = _resolve_field(raw, index, spec, consumed, honeypots | metadata)
        if key is not None:
            consumed.add(key)
            sources[spec.name] = key
        values[spec.name] = value

    fallback_keys: dict[str, str] = {}
    ignored = form.all_aliases() | honeypots | metadata
    for spec in form.fields:
        if not spec.best_guess or values[spec.name]:
            continue
        key = _best_guess_key(raw, consumed, ignored)
        if key is None:
            continue
        values[spec.name] = stringify(raw[key])
        consumed.add(key)
        sources[spec.name] = key
        fallback_keys[spec.name] = key
        logger.info(
            "Form %r: %s resolved from unrecognised key %r (best-guess fallback)",
            form.slug,
            spec.name,
            key,
        )

    for spec in form.fields:
        if spec.default and not values[spec.name]:
            values[spec.name] = spec.default

    return CanonicalApplication(
        form=form.slug,
        values=values,
        sources=sources,
        fallback_keys=fallback_keys,
        raw=raw,
        submitted_at=submitted_at,
    )
