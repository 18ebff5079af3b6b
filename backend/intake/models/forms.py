"""
Pydantic models that declare a web form to the intake pipeline.

Models:
  FieldKind             — how a canonical field is normalised, validated and rendered
  FieldSpec             — one canonical field plus its historical raw key aliases
  ConfirmationTemplate  — wording of the optional applicant confirmation email
  FormDefinition        — everything the pipeline needs to process one form type

A FormDefinition is pure data. The resolver, validator and renderer are
generic functions that read it; no form gets its own handler code.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator


class FieldKind(str, Enum):
    TEXT = "text"
    LONG_TEXT = "long_text"
    EMAIL = "email"
    PHONE = "phone"
    HANDLE = "handle"
    URL = "url"
    BOOLEAN = "boolean"


class FieldSpec(BaseModel):
    """
    A canonical field and the raw keys it may arrive under.

    aliases are tried in order (case-insensitive); the first one holding a
    non-empty value wins. key_patterns are regular expressions matched
    against raw keys when no alias matched — a tolerance kept for forms whose
    field names were never stable.
    """
    model_config = {"frozen": True}

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    aliases: tuple[str, ...] = Field(default=(), validate_default=True)
    key_patterns: tuple[str, ...] = ()

    # Eligible for the "longest free-text answer" legacy fallback
    best_guess: bool = False

    # Declared value used when nothing resolves (e.g. position "Artist")
    default: str = ""

    max_length: Optional[int] = None

    # Renderer choice: drop the line entirely instead of "(not provided)"
    omit_when_blank: bool = False

    # Listed in the applicant confirmation summary
    in_confirmation: bool = False

    @field_validator("aliases")
    @classmethod
    def _lead_with_canonical_name(cls, aliases: tuple[str, ...], info: ValidationInfo) -> tuple[str, ...]:
        # The canonical key itself is always accepted, first.
        name = info.data.get("name", "")
        return (name,) + tuple(a for a in aliases if a != name)


class ConfirmationTemplate(BaseModel):
    """Wording for the thank-you email sent back to the applicant."""
    model_config = {"frozen": True}

    subject: str
    heading: str
    body: str
    sign_off: str = "— Seven Tattoo"


class FormDefinition(BaseModel):
    """
    Declarative description of one form type.

    fields is ordered: it is both the alias table and the render order of
    the studio notice. required lists canonical names in the order that
    validation errors are reported.
    """
    model_config = {"frozen": True}

    slug: str
    title: str
    fields: tuple[FieldSpec, ...]
    required: tuple[str, ...]

    honeypot_keys: tuple[str, ...] = ("hp_extra_info",)
    # Tracking / page metadata, never treated as an answer by the fallback
    metadata_keys: tuple[str, ...] = ()

    subject_prefix: str = "Application: "
    subject_details: tuple[str, ...] = ()
    subject_fallback_name: str = "Applicant"

    # Config lookup key for the studio inbox (see IntakeConfig.recipient_for)
    recipient_key: str = ""
    # Canonical field that may override the studio inbox per submission
    notify_override_field: Optional[str] = None
    reply_to_applicant: bool = True

    confirmation: Optional[ConfirmationTemplate] = None

    include_raw_dump: bool = False
    show_submitted_at: bool = False

    @model_validator(mode="after")
    def _check_references(self) -> "FormDefinition":
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"Form {self.slug!r} declares a canonical field twice")
        referenced = list(self.required) + list(self.subject_details)
        if self.notify_override_field:
            referenced.append(self.notify_override_field)
        unknown = [n for n in referenced if n not in names]
        if unknown:
            raise ValueError(f"Form {self.slug!r} references undeclared fields: {unknown}")
        return self

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def all_aliases(self) -> set[str]:
        """Every raw key (lower-cased) that some field of this form claims."""
        return {alias.lower() for spec in self.fields for alias in spec.aliases}
