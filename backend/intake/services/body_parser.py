"""
Request body parsing.

Turns the raw bytes of a form POST into the RawInput mapping the resolver
works on. Storefront forms post either JSON or classic URL-encoded bodies;
some serverless gateways additionally base64-encode the payload.

Supported content types:
  application/json                   — must decode to a JSON object
  application/x-www-form-urlencoded  — repeated keys collapse into a list
  (none)                             — tried as JSON

Anything else, or a body that does not parse under its declared type,
raises MalformedInputError.
"""

import base64
import binascii
import json
import logging
from typing import Any, Optional, Union
from urllib.parse import parse_qsl

from intake.errors import MalformedInputError

logger = logging.getLogger(__name__)

JSON_TYPE = "application/json"
FORM_TYPE = "application/x-www-form-urlencoded"


def _media_type(content_type: Optional[str]) -> str:
    """Return the bare media type: 'Application/JSON; charset=utf-8' -> 'application/json'."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def _decode(raw: Union[bytes, str, None], is_base64: bool) -> str:
    if raw is None:
        return ""
    if is_base64:
        try:
            raw = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedInputError("Body is not valid base64") from exc
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("Body is not valid UTF-8") from exc
    return raw


def parse_json_body(text: str) -> dict[str, Any]:
    """
    Parse a JSON body. An empty body is an empty submission.

    Raises MalformedInputError for invalid JSON or a non-object top level.
    """
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError("Invalid JSON body") from exc
    if not isinstance(data, dict):
        raise MalformedInputError("JSON body must be an object")
    return data


def parse_form_body(text: str) -> dict[str, Any]:
    """
    Parse an application/x-www-form-urlencoded body.

    Multi-select inputs (e.g. several checked days) post the same key more
    than once; those collapse into a list in submission order.
    """
    data: dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        if key in data:
            existing = data[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                data[key] = [existing, value]
        else:
            data[key] = value
    return data


def parse_body(
    raw: Union[bytes, str, None],
    content_type: Optional[str] = None,
    is_base64: bool = False,
) -> dict[str, Any]:
    """
    Parse a request body into a RawInput mapping.

    Args:
        raw:          Body as received (bytes or already-decoded text).
        content_type: Value of the Content-Type header, if any.
        is_base64:    True when the gateway base64-encoded the body.

    Returns:
        dict of raw key -> value.

    Raises:
        MalformedInputError: when the body cannot be parsed under the
        declared content type, or the content type is unsupported.
    """
    media_type = _media_type(content_type)
    text = _decode(raw, is_base64)

    if media_type == FORM_TYPE:
        return parse_form_body(text)
    if media_type == JSON_TYPE or media_type.endswith("+json") or not media_type:
        return parse_json_body(text)

    logger.debug("parse_body: unsupported content type %r", content_type)
    raise MalformedInputError(
        f"Unsupported content type {media_type!r}; use {JSON_TYPE} or {FORM_TYPE}"
    )
