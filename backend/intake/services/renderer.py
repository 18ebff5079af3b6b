"""
Email rendering for form submissions.

Produces the studio notice (every declared field, in declared order) and the
optional applicant confirmation as plain-text + HTML pairs. Output depends
only on the CanonicalApplication and its FormDefinition.

Rules:
  - Blank values render as "(not provided)" unless the field declares
    omit_when_blank, in which case the line is dropped.
  - Long-text answers render as a labelled block; line breaks survive as <br>.
  - Every value interpolated into HTML goes through escape(); links render
    as anchors only when they are http(s) URLs.

Public API:
  escape(value) -> str
  render_subject(application, form) -> str
  render_notice(application, form) -> RenderedMessage
  render_confirmation(application, form) -> RenderedMessage | None
"""

import html
import logging
import re
from typing import Any, Optional

from intake.models.forms import FieldKind, FieldSpec, FormDefinition
from intake.models.submission import CanonicalApplication, FieldValue, RenderedMessage
from intake.services.resolver import stringify
from intake.services.validator import is_valid_email, is_valid_url

logger = logging.getLogger(__name__)

PLACEHOLDER = "(not provided)"
NAME_FIELD = "full_name"
RAW_DUMP_RULE = "— — — — —"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Inline styles
# ---------------------------------------------------------------------------

_WRAPPER_STYLE = (
    "font-family:system-ui,-apple-system,'Segoe UI',Roboto,Arial,sans-serif;"
    "color:#111;line-height:1.55;"
)
_HEADING_STYLE = "margin:0 0 10px;font-size:20px;"
_TABLE_STYLE = "border-collapse:collapse;width:100%;max-width:760px;"
_CELL_STYLE = "padding:6px 10px;border-top:1px solid #eee;vertical-align:top;"
_PRE_STYLE = (
    "white-space:pre-wrap;background:#f7f7f7;border:1px solid #eee;"
    "border-radius:8px;padding:10px;margin:0;"
)


# ---------------------------------------------------------------------------
# Escaping helpers
# ---------------------------------------------------------------------------

def escape(value: Any) -> str:
    """HTML-escape & < > " ' for both element and attribute context."""
    return html.escape(str(value), quote=True)


def _nl2br(value: str) -> str:
    text = value.replace("\r\n", "\n").replace("\r", "\n")
    return escape(text).replace("\n", "<br>")


def _one_line(value: str) -> str:
    return " ".join(value.split())


def _href(url: str) -> Optional[str]:
    """Return a safe absolute href for url, or None when it is not an http(s) link."""
    if not is_valid_url(url):
        return None
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    if not _SCHEME_RE.match(url):
        return "https://" + url
    return url


# ---------------------------------------------------------------------------
# Field display
# ---------------------------------------------------------------------------

def _display_text(spec: FieldSpec, value: FieldValue) -> str:
    if spec.kind == FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    return value if isinstance(value, str) else stringify(value)


def _display_html(spec: FieldSpec, text: str) -> str:
    if not text:
        return f"<em>{PLACEHOLDER}</em>"
    if spec.kind == FieldKind.LONG_TEXT:
        return _nl2br(text)
    if spec.kind == FieldKind.URL:
        href = _href(text)
        if href:
            return f'<a href="{escape(href)}">{escape(text)}</a>'
    if spec.kind == FieldKind.EMAIL and is_valid_email(text):
        return f'<a href="mailto:{escape(text)}">{escape(text)}</a>'
    return escape(text)


def _visible_fields(application: CanonicalApplication, form: FormDefinition):
    """Yield (spec, display_text) for each field the notice shows."""
    for spec in form.fields:
        text = _display_text(spec, application.get(spec.name))
        if not text and spec.omit_when_blank:
            continue
        yield spec, text


def _raw_pairs(application: CanonicalApplication, form: FormDefinition) -> list[str]:
    honeypots = {k.lower() for k in form.honeypot_keys}
    return [
        f"{key}: {stringify(value)}"
        for key, value in application.raw.items()
        if str(key).lower() not in honeypots
    ]


def _join_lines(lines: list[str]) -> str:
    """Join lines, collapsing runs of blank lines and trimming the ends."""
    out: list[str] = []
    for line in lines:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    while out and not out[-1]:
        out.pop()
    return "\n".join(out)


# ---------------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------------

def render_subject(application: CanonicalApplication, form: FormDefinition) -> str:
    """
    Build the notice subject: prefix + name + optional details.

    Examples (artist form):
        name "Jane Doe", position "Artist"  -> "Application: Jane Doe (Artist)"
        name ""                             -> "Application: Applicant (Artist)"
    """
    name = _one_line(application.text(NAME_FIELD)) or form.subject_fallback_name
    details = [
        _one_line(application.text(field))
        for field in form.subject_details
        if application.text(field)
    ]
    subject = f"{form.subject_prefix}{name}"
    if details:
        subject += f" ({', '.join(details)})"
    return subject


# ---------------------------------------------------------------------------
# Studio notice
# ---------------------------------------------------------------------------

def _notice_text(application: CanonicalApplication, form: FormDefinition) -> str:
    lines = [form.title, "-" * len(form.title)]
    if form.show_submitted_at and application.submitted_at:
        lines.append(f"Submitted: {application.submitted_at.isoformat()}")
    lines.append("")

    for spec, text in _visible_fields(application, form):
        shown = text or PLACEHOLDER
        if spec.kind == FieldKind.LONG_TEXT:
            lines.extend(["", f"{spec.label}:", shown, ""])
        else:
            lines.append(f"{spec.label}: {shown}")
        fallback_key = application.fallback_keys.get(spec.name)
        if fallback_key:
            lines.append(f"[{spec.label} key used: {fallback_key}]")

    if form.include_raw_dump:
        lines.extend(["", RAW_DUMP_RULE, "All submitted fields (raw)", RAW_DUMP_RULE])
        lines.extend(_raw_pairs(application, form))

    return _join_lines(lines)


def _notice_html(application: CanonicalApplication, form: FormDefinition) -> str:
    rows: list[str] = []
    for spec, text in _visible_fields(application, form):
        rows.append(
            f'<tr><td style="{_CELL_STYLE}"><strong>{escape(spec.label)}:</strong></td>'
            f'<td style="{_CELL_STYLE}">{_display_html(spec, text)}</td></tr>'
        )
        fallback_key = application.fallback_keys.get(spec.name)
        if fallback_key:
            rows.append(
                f'<tr><td style="{_CELL_STYLE}"><em>[{escape(spec.label)} key used]</em></td>'
                f'<td style="{_CELL_STYLE}">{escape(fallback_key)}</td></tr>'
            )

    parts = [
        f'<div style="{_WRAPPER_STYLE}">',
        f'<h2 style="{_HEADING_STYLE}">{escape(form.title)}</h2>',
    ]
    if form.show_submitted_at and application.submitted_at:
        parts.append(
            f"<p><strong>Submitted:</strong> {escape(application.submitted_at.isoformat())}</p>"
        )
    parts.append(f'<table cellpadding="0" cellspacing="0" style="{_TABLE_STYLE}">')
    parts.extend(rows)
    parts.append("</table>")

    if form.include_raw_dump:
        raw_dump = "\n".join(_raw_pairs(application, form))
        parts.append('<h3 style="margin:22px 0 8px;">All submitted fields (raw)</h3>')
        parts.append(f'<pre style="{_PRE_STYLE}">{escape(raw_dump)}</pre>')

    parts.append("</div>")
    return "\n".join(parts)


def render_notice(application: CanonicalApplication, form: FormDefinition) -> RenderedMessage:
    """Render the internal notice sent to the studio inbox."""
    return RenderedMessage(
        subject=render_subject(application, form),
        text=_notice_text(application, form),
        html=_notice_html(application, form),
    )


# ---------------------------------------------------------------------------
# Applicant confirmation
# ---------------------------------------------------------------------------

def render_confirmation(
    application: CanonicalApplication,
    form: FormDefinition,
) -> Optional[RenderedMessage]:
    """
    Render the thank-you email for the applicant.

    Returns None when the form does not send one.
    """
    template = form.confirmation
    if template is None:
        return None

    name = _one_line(application.text(NAME_FIELD))
    heading = template.heading.format(name=name or form.subject_fallback_name)
    greeting = f"Hi {name}," if name else "Hi,"

    summary = [
        (spec, application.text(spec.name))
        for spec in form.fields
        if spec.in_confirmation and application.text(spec.name)
    ]

    text_lines = [greeting, "", template.body, ""]
    if summary:
        text_lines.append("What we received:")
        text_lines.extend(f"- {spec.label}: {_one_line(value)}" for spec, value in summary)
        text_lines.append("")
    text_lines.append(template.sign_off)

    html_parts = [
        f'<div style="{_WRAPPER_STYLE}">',
        f'<h2 style="{_HEADING_STYLE}">{escape(heading)}</h2>',
        f"<p>{escape(greeting)}</p>",
        f"<p>{escape(template.body)}</p>",
    ]
    if summary:
        html_parts.append("<p><strong>What we received:</strong></p>")
        html_parts.append("<ul>")
        html_parts.extend(
            f"<li>{escape(spec.label)}: {_display_html(spec, value)}</li>" for spec, value in summary
        )
        html_parts.append("</ul>")
    html_parts.append(f"<p>{escape(template.sign_off)}</p>")
    html_parts.append("</div>")

    return RenderedMessage(
        subject=template.subject,
        text=_join_lines(text_lines),
        html="\n".join(html_parts),
    )
