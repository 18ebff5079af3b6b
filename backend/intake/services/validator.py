"""
Validation of a resolved CanonicalApplication against its form.

Required fields are checked for presence first; format constraints apply
only to values that are present, so a field is reported either as missing
or as invalid, never both.

URL shape is enforced only on required URL fields. An optional link that is
not a URL (a pasted "Instagram ad" in a source field) is kept as text and
rendered escaped, never linked.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from intake.models.forms import FieldKind, FieldSpec, FormDefinition
from intake.models.submission import CanonicalApplication, FieldValue, ValidationResult

HANDLE_RE = re.compile(r"^@?[A-Za-z0-9._]{2,30}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def is_present(value: Optional[FieldValue]) -> bool:
    """Empty string, None and False (unchecked consent) count as missing."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_RE.match(value.strip()) is not None


def is_valid_handle(value: Optional[str]) -> bool:
    return bool(value) and HANDLE_RE.match(value) is not None


def is_valid_url(value: Optional[str]) -> bool:
    """
    Return True for an http(s) URL with a dotted host.

    Scheme-less links ("drive.google.com/abc") are accepted, since that is
    how most people paste them. Other schemes (javascript:, mailto:, ftp:)
    and values containing whitespace are rejected.

    Examples:
        "https://example.com/portfolio"  -> True
        "example.com/portfolio"          -> True
        "javascript:alert(1)"            -> False
        "not a url"                      -> False
    """
    if not value:
        return False
    text = value.strip()
    if not text or any(ch.isspace() for ch in text):
        return False

    if text.startswith("//"):
        text = "https:" + text
    elif not _SCHEME_RE.match(text):
        text = "https://" + text

    try:
        parts = urlsplit(text)
        host = parts.hostname or ""
    except ValueError:
        return False

    if parts.scheme.lower() not in ("http", "https"):
        return False
    return "." in host and not host.startswith(".") and not host.endswith(".")


def _format_ok(spec: FieldSpec, value: FieldValue, required: bool = True) -> bool:
    if isinstance(value, bool):
        return True
    if spec.max_length is not None and len(value) > spec.max_length:
        return False
    if spec.kind == FieldKind.HANDLE:
        return is_valid_handle(value)
    if spec.kind == FieldKind.URL:
        return is_valid_url(value) if required else True
    if spec.kind == FieldKind.EMAIL:
        return is_valid_email(value)
    return True


def validate(application: CanonicalApplication, form: FormDefinition) -> ValidationResult:
    """
    Check required presence and format constraints.

    Required fields are reported in the order form.required declares them;
    format failures of optional fields follow in field declaration order.
    Optional URL fields are not shape-checked.

    Args:
        application: Output of resolver.resolve for this form.
        form:        The form definition.

    Returns:
        ValidationResult — ok is True only when nothing failed.
    """
    result = ValidationResult()

    for name in form.required:
        spec = form.field(name)
        value = application.get(name)
        if not is_present(value):
            result.add_missing(name)
        elif not _format_ok(spec, value):
            result.add_invalid(name)

    required = set(form.required)
    for spec in form.fields:
        if spec.name in required:
            continue
        value = application.get(spec.name)
        if is_present(value) and not _format_ok(spec, value, required=False):
            result.add_invalid(spec.name)

    return result
