"""
Form submission router.

One route per verb serves every registered form; the slug selects the
FormDefinition and the shared pipeline does the rest.

Endpoints:
  GET  /                — list the registered forms
  GET  /{slug}          — liveness/version probe for one form
  POST /{slug}          — submit the form (JSON or URL-encoded body)

Status mapping for POST:
  sent / filtered          200
  malformed                400
  rejected                 422
  send_failed              502
  configuration_missing    500
  unknown slug             404
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from intake.config import IntakeConfig, get_config
from intake.errors import UnknownFormError
from intake.forms import FORMS, get_form
from intake.models.forms import FormDefinition
from intake.models.submission import OutcomeKind
from intake.services.mailer import build_mailer
from intake.services.pipeline import MailerFactory, handle_submission

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_CODES = {
    OutcomeKind.SENT: 200,
    OutcomeKind.FILTERED: 200,
    OutcomeKind.MALFORMED: 400,
    OutcomeKind.REJECTED: 422,
    OutcomeKind.SEND_FAILED: 502,
    OutcomeKind.CONFIGURATION_MISSING: 500,
}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_mailer_factory() -> MailerFactory:
    """Return the mail transport factory. Tests override this dependency."""
    return build_mailer


def _form_or_404(slug: str) -> FormDefinition:
    try:
        return get_form(slug)
    except UnknownFormError as exc:
        logger.info("Request for unknown form %r", slug)
        raise HTTPException(status_code=404, detail=str(exc))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("")
async def list_forms():
    return {
        "ok": True,
        "forms": [{"slug": form.slug, "title": form.title} for form in FORMS.values()],
    }


@router.get("/{slug}")
async def probe_form(slug: str, config: IntakeConfig = Depends(get_config)):
    """Answer the storefront's GET probe so it can tell the endpoint is live."""
    form = _form_or_404(slug)
    return {"ok": True, "form": form.slug, "version": config.version}


@router.post("/{slug}")
async def submit_form(
    slug: str,
    request: Request,
    content_type: Optional[str] = Header(None),
    config: IntakeConfig = Depends(get_config),
    mailer_factory: MailerFactory = Depends(get_mailer_factory),
):
    """
    Process one form submission.

    The body is read raw so that both JSON and URL-encoded posts go through
    the same parser; the response body is always a SubmissionResponse.
    """
    form = _form_or_404(slug)
    body = await request.body()

    outcome = handle_submission(
        body,
        content_type,
        form,
        config,
        mailer_factory=mailer_factory,
    )

    return JSONResponse(
        status_code=_STATUS_CODES[outcome.kind],
        content=outcome.to_response().model_dump(exclude_none=True),
    )
