"""
Submission pipeline: parse → honeypot → resolve → validate → render → send.

Shared by every form. The result is always a SubmissionOutcome; expected
failures (bad body, missing fields, mail transport errors) never escape as
exceptions.

Delivery contract:
  - The studio notice is the business-critical send. If it fails, the
    whole submission fails (send_failed) and no confirmation is attempted.
  - The applicant confirmation is best-effort. If it fails after the notice
    went out, the submission is still reported as sent, with
    confirmation_sent = False.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from intake.config import IntakeConfig
from intake.errors import ConfigurationMissingError, MailDeliveryError, MalformedInputError
from intake.models.forms import FormDefinition
from intake.models.mail import MailMessage
from intake.models.submission import CanonicalApplication, OutcomeKind, SubmissionOutcome
from intake.services.body_parser import parse_body
from intake.services.honeypot import is_spam
from intake.services.mailer import Mailer, build_mailer
from intake.services.renderer import NAME_FIELD, render_confirmation, render_notice
from intake.services.resolver import resolve
from intake.services.validator import is_valid_email, validate

logger = logging.getLogger(__name__)

EMAIL_FIELD = "email"

MailerFactory = Callable[[IntakeConfig], Mailer]


# ---------------------------------------------------------------------------
# Message assembly
# ---------------------------------------------------------------------------

def resolve_recipient(
    application: CanonicalApplication,
    form: FormDefinition,
    config: IntakeConfig,
) -> str:
    """
    Pick the studio inbox for this submission.

    A per-submission override is honoured only when it is a well-formed
    email address; otherwise the form's configured inbox is used.
    """
    if form.notify_override_field:
        override = application.text(form.notify_override_field)
        if override and is_valid_email(override):
            return override.strip()
        if override:
            logger.warning(
                "Form %r: ignoring malformed inbox override %r", form.slug, override
            )
    return config.recipient_for(form.recipient_key or form.slug)


def build_messages(
    application: CanonicalApplication,
    form: FormDefinition,
    config: IntakeConfig,
) -> tuple[MailMessage, Optional[MailMessage]]:
    """
    Build the studio notice and, when the form sends one, the confirmation.

    Returns:
        (notice, confirmation) — confirmation is None when the form has no
        confirmation template or the applicant email is unusable.
    """
    applicant_email = application.text(EMAIL_FIELD)
    applicant_name = application.text(NAME_FIELD)
    has_applicant_email = is_valid_email(applicant_email)

    rendered = render_notice(application, form)
    notice = MailMessage(
        to=resolve_recipient(application, form, config),
        from_email=config.from_email,
        from_name=config.from_name,
        subject=rendered.subject,
        text=rendered.text,
        html=rendered.html,
    )
    if form.reply_to_applicant and has_applicant_email:
        notice.reply_to = applicant_email
        # header display names must be a single line
        notice.reply_to_name = " ".join(applicant_name.split()) or None

    confirmation: Optional[MailMessage] = None
    rendered_confirmation = render_confirmation(application, form)
    if rendered_confirmation is not None and has_applicant_email:
        confirmation = MailMessage(
            to=applicant_email,
            from_email=config.from_email,
            from_name=config.from_name,
            subject=rendered_confirmation.subject,
            text=rendered_confirmation.text,
            html=rendered_confirmation.html,
        )
    return notice, confirmation


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------

def process_submission(
    raw: dict[str, Any],
    form: FormDefinition,
    config: IntakeConfig,
    mailer_factory: MailerFactory = build_mailer,
    now: Optional[datetime] = None,
) -> SubmissionOutcome:
    """
    Run an already-parsed submission through the pipeline.

    Args:
        raw:            Parsed request body (RawInput).
        form:           Definition of the submitted form.
        config:         Injected runtime configuration.
        mailer_factory: Builds the mail transport; called only once the
                        submission is valid, so a missing credential never
                        masks a validation error.
        now:            Receipt time (defaults to the current UTC time).

    Returns:
        SubmissionOutcome tagged filtered / rejected / sent / send_failed /
        configuration_missing.
    """
    if is_spam(raw, form):
        return SubmissionOutcome(kind=OutcomeKind.FILTERED, form=form.slug)

    application = resolve(raw, form, submitted_at=now or datetime.now(timezone.utc))
    result = validate(application, form)
    if not result.ok:
        logger.warning(
            "Form %r submission rejected: missing=%s invalid=%s (got keys: %s)",
            form.slug,
            result.missing,
            result.invalid,
            sorted(str(k) for k in raw),
        )
        return SubmissionOutcome(
            kind=OutcomeKind.REJECTED,
            form=form.slug,
            missing_fields=result.missing,
            invalid_fields=result.invalid,
            error="Missing or invalid fields",
        )

    try:
        mailer = mailer_factory(config)
    except ConfigurationMissingError as exc:
        logger.error("Form %r: cannot send email: %s", form.slug, exc)
        return SubmissionOutcome(
            kind=OutcomeKind.CONFIGURATION_MISSING,
            form=form.slug,
            error="Email transport not configured",
        )

    notice, confirmation = build_messages(application, form, config)

    try:
        mailer.send(notice)
    except MailDeliveryError as exc:
        logger.error("Form %r: studio notice to %s failed: %s", form.slug, notice.to, exc)
        return SubmissionOutcome(
            kind=OutcomeKind.SEND_FAILED,
            form=form.slug,
            error="Email send failed",
        )

    confirmation_sent: Optional[bool] = None
    if confirmation is not None:
        try:
            mailer.send(confirmation)
            confirmation_sent = True
        except MailDeliveryError as exc:
            logger.warning(
                "Form %r: applicant confirmation to %s failed (notice was delivered): %s",
                form.slug,
                confirmation.to,
                exc,
            )
            confirmation_sent = False

    logger.info(
        "Form %r submission delivered to %s (confirmation_sent=%s)",
        form.slug,
        notice.to,
        confirmation_sent,
    )
    return SubmissionOutcome(
        kind=OutcomeKind.SENT,
        form=form.slug,
        confirmation_sent=confirmation_sent,
        fallback_keys=application.fallback_keys,
    )


def handle_submission(
    body: Union[bytes, str, None],
    content_type: Optional[str],
    form: FormDefinition,
    config: IntakeConfig,
    mailer_factory: MailerFactory = build_mailer,
    is_base64: bool = False,
    now: Optional[datetime] = None,
) -> SubmissionOutcome:
    """Parse a raw request body and process it; malformed bodies become an outcome."""
    try:
        raw = parse_body(body, content_type, is_base64=is_base64)
    except MalformedInputError as exc:
        logger.warning("Form %r: malformed body: %s", form.slug, exc)
        return SubmissionOutcome(kind=OutcomeKind.MALFORMED, form=form.slug, error=str(exc))

    return process_submission(raw, form, config, mailer_factory=mailer_factory, now=now)
