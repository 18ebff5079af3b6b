"""
Runtime configuration for the intake service.

Everything the pipeline needs from the environment is read here, once, into
an IntakeConfig. Services receive the config object explicitly; nothing
below this module calls os.getenv.

Environment variables
---------------------
MAIL_PROVIDER          Mail transport: "sendgrid" (default), "smtp" or "log".
SENDGRID_API_KEY       SendGrid API key (required for MAIL_PROVIDER=sendgrid).
SMTP_HOST / SMTP_PORT  SMTP server (required for MAIL_PROVIDER=smtp; port 587).
SMTP_USER / SMTP_PASS  Optional SMTP credentials.
FROM_EMAIL             Sender address. SEND_FROM is accepted as a legacy alias.
FROM_NAME              Sender display name.
INTERNAL_EMAIL         Default studio inbox for every form.
<FORM>_RECEIVER        Per-form studio inbox, e.g. STAFF_RECEIVER, BOOKING_RECEIVER.
CORS_ORIGINS           Extra allowed browser origins, comma-separated.
MAIL_TIMEOUT_SECONDS   Transport timeout (default 10).
INTAKE_VERSION         Version string reported by the GET probe.
"""

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.1.0"
DEFAULT_INTERNAL_EMAIL = "careers@seventattoolv.com"
DEFAULT_FROM_EMAIL = "no-reply@seventattoolv.com"
DEFAULT_FROM_NAME = "Seven Tattoo"

# Storefront origins the forms are embedded in
STUDIO_ORIGINS = [
    "https://seventattoolv.com",
    "https://www.seventattoolv.com",
    "https://seventattoolv.myshopify.com",
]

# Form recipient keys -> env var holding that form's inbox
_RECEIVER_ENV = {
    "artist": "ARTIST_RECEIVER",
    "staff": "STAFF_RECEIVER",
    "backoffice": "BACKOFFICE_RECEIVER",
    "front_desk": "FRONT_DESK_RECEIVER",
    "booking": "BOOKING_RECEIVER",
}

# Inboxes that differ from INTERNAL_EMAIL when nothing is configured
_RECEIVER_DEFAULTS = {
    "booking": "bookings@seventattoolv.com",
}


class IntakeConfig(BaseModel):
    """Explicit configuration object injected into the pipeline."""

    mail_provider: str = "sendgrid"
    sendgrid_api_key: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    mail_timeout_seconds: float = 10.0

    from_email: str = DEFAULT_FROM_EMAIL
    from_name: str = DEFAULT_FROM_NAME
    internal_email: str = DEFAULT_INTERNAL_EMAIL
    # recipient key -> inbox address
    recipients: dict[str, str] = Field(default_factory=dict)

    cors_origins: list[str] = Field(default_factory=lambda: list(STUDIO_ORIGINS))
    version: str = DEFAULT_VERSION

    def recipient_for(self, recipient_key: str) -> str:
        """
        Return the studio inbox for a form.

        Priority:
          1. recipients[recipient_key] (from <FORM>_RECEIVER)
          2. built-in per-form default (bookings go to the bookings inbox)
          3. internal_email
        """
        return (
            self.recipients.get(recipient_key)
            or _RECEIVER_DEFAULTS.get(recipient_key)
            or self.internal_email
        )


def _env(name: str, *fallbacks: str) -> Optional[str]:
    """Return the first non-blank value among name and its legacy fallbacks."""
    for key in (name,) + fallbacks:
        value = (os.getenv(key) or "").strip()
        if value:
            return value
    return None


def _env_number(name: str, cast, default):
    """Parse a numeric variable, falling back to default when it does not parse."""
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s, using %s", name, raw, cast.__name__, default)
        return default


def _parse_origins(raw: Optional[str]) -> list[str]:
    """
    Build the allowed-origin list: studio storefronts plus CORS_ORIGINS.

    Duplicates are removed while preserving order.
    """
    extra = [o.strip() for o in (raw or "").split(",") if o.strip()]
    seen: set = set()
    origins: list[str] = []
    for origin in STUDIO_ORIGINS + extra:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)
    return origins


def load_config() -> IntakeConfig:
    """Assemble an IntakeConfig from the process environment (and .env)."""
    load_dotenv()

    recipients = {}
    for key, env_name in _RECEIVER_ENV.items():
        value = _env(env_name)
        if value:
            recipients[key] = value

    config = IntakeConfig(
        mail_provider=(_env("MAIL_PROVIDER", "EMAIL_PROVIDER") or "sendgrid").lower(),
        sendgrid_api_key=_env("SENDGRID_API_KEY"),
        smtp_host=_env("SMTP_HOST"),
        smtp_port=_env_number("SMTP_PORT", int, 587),
        smtp_user=_env("SMTP_USER"),
        smtp_password=_env("SMTP_PASS", "SMTP_PASSWORD"),
        mail_timeout_seconds=_env_number("MAIL_TIMEOUT_SECONDS", float, 10.0),
        from_email=_env("FROM_EMAIL", "SEND_FROM") or DEFAULT_FROM_EMAIL,
        from_name=_env("FROM_NAME") or DEFAULT_FROM_NAME,
        internal_email=_env("INTERNAL_EMAIL") or DEFAULT_INTERNAL_EMAIL,
        recipients=recipients,
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS")),
        version=_env("INTAKE_VERSION") or DEFAULT_VERSION,
    )
    logger.info(
        "Intake config loaded: mail_provider=%s, forms with dedicated inbox=%s",
        config.mail_provider,
        sorted(recipients),
    )
    return config


@lru_cache(maxsize=1)
def get_config() -> IntakeConfig:
    """FastAPI dependency: the process-wide config, built on first use."""
    return load_config()
