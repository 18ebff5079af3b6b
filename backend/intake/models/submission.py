"""
Pydantic models for a single form submission as it moves through the pipeline.

Models:
  CanonicalApplication  — the normalised record produced by the resolver
  ValidationResult      — missing / malformed canonical fields
  RenderedMessage       — subject + text + HTML bodies of one email
  OutcomeKind           — tag of a SubmissionOutcome
  SubmissionOutcome     — what happened to a submission (filtered, rejected, sent, …)
  SubmissionResponse    — structured result handed to the HTTP layer
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Resolver / validator output
# ---------------------------------------------------------------------------

FieldValue = Union[str, bool]


class CanonicalApplication(BaseModel):
    """
    A submission mapped onto its form's canonical fields.

    values holds every canonical field the form declares. Unresolved fields
    are present as "" (or False for booleans), never absent.
    """

    form: str
    values: dict[str, FieldValue]
    # canonical field -> raw key that supplied its value
    sources: dict[str, str] = Field(default_factory=dict)
    # canonical field -> raw key picked by the longest-free-text fallback
    fallback_keys: dict[str, str] = Field(default_factory=dict)
    raw: dict[str, Any] = Field(default_factory=dict)
    submitted_at: Optional[datetime] = None

    def get(self, name: str) -> FieldValue:
        return self.values.get(name, "")

    def text(self, name: str) -> str:
        value = self.values.get(name, "")
        if isinstance(value, bool):
            return "Yes" if value else "No"
        return value


class ValidationResult(BaseModel):
    """
    Failing canonical field names.

    failing lists every failing field in declared order; missing and
    invalid split it into absent values and present-but-malformed ones.
    """

    failing: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    invalid: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failing

    def add_missing(self, name: str) -> None:
        self.failing.append(name)
        self.missing.append(name)

    def add_invalid(self, name: str) -> None:
        self.failing.append(name)
        self.invalid.append(name)


# ---------------------------------------------------------------------------
# Renderer output
# ---------------------------------------------------------------------------

class RenderedMessage(BaseModel):
    subject: str
    text: str
    html: str


# ---------------------------------------------------------------------------
# Pipeline outcome
# ---------------------------------------------------------------------------

class OutcomeKind(str, Enum):
    FILTERED = "filtered"
    MALFORMED = "malformed"
    REJECTED = "rejected"
    SENT = "sent"
    SEND_FAILED = "send_failed"
    CONFIGURATION_MISSING = "configuration_missing"


# Error kinds surfaced to clients, keyed by outcome
_ERROR_KINDS = {
    OutcomeKind.MALFORMED: "malformed_input",
    OutcomeKind.REJECTED: "validation_failed",
    OutcomeKind.SEND_FAILED: "delivery_failed",
    OutcomeKind.CONFIGURATION_MISSING: "configuration_missing",
}


class SubmissionOutcome(BaseModel):
    """
    Tagged result of processing one submission.

    filtered   — honeypot tripped; nothing was sent, the client sees success
    malformed  — the body could not be parsed
    rejected   — required fields missing or malformed; nothing was sent
    sent       — the studio notice went out (the confirmation may have failed)
    send_failed            — the studio notice could not be delivered
    configuration_missing  — no mail transport could be built
    """

    kind: OutcomeKind
    form: str
    missing_fields: list[str] = Field(default_factory=list)
    invalid_fields: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    confirmation_sent: Optional[bool] = None
    fallback_keys: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.kind in (OutcomeKind.FILTERED, OutcomeKind.SENT)

    def to_response(self) -> "SubmissionResponse":
        if self.kind == OutcomeKind.SENT:
            data: dict[str, Any] = {"form": self.form}
            if self.confirmation_sent is not None:
                data["confirmation_sent"] = self.confirmation_sent
            return SubmissionResponse(ok=True, data=data)

        if self.kind == OutcomeKind.FILTERED:
            # Indistinguishable from a real success for the submitter.
            return SubmissionResponse(ok=True, data={"form": self.form})

        response = SubmissionResponse(
            ok=False,
            error_kind=_ERROR_KINDS[self.kind],
            error=self.error,
        )
        if self.kind == OutcomeKind.REJECTED:
            response.missing_fields = self.missing_fields
            response.invalid_fields = self.invalid_fields
        return response


class SubmissionResponse(BaseModel):
    """JSON body returned to the browser."""

    ok: bool
    data: Optional[dict[str, Any]] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None
    missing_fields: Optional[list[str]] = None
    invalid_fields: Optional[list[str]] = None
