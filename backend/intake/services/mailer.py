"""
Outbound mail transports.

The pipeline only knows the Mailer protocol: send(MailMessage) either
returns or raises MailDeliveryError. Which transport is used is a config
decision (MAIL_PROVIDER).

Supported providers:
  - sendgrid  (default) SendGrid v3 Web API over HTTPS, via httpx
  - smtp      any SMTP relay (SSL on port 465, STARTTLS otherwise)
  - log       writes the message to the log instead of sending (local dev)

Adding a new provider:
  1. Write a class with a send(message: MailMessage) -> None method.
  2. Write a _build_<provider>(config) function that raises
     ConfigurationMissingError when its settings are absent.
  3. Register it in _BUILDERS and set MAIL_PROVIDER=<provider>.

Each send is attempted exactly once; there is no retry here.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Callable, Optional, Protocol

import httpx

from intake.config import IntakeConfig
from intake.errors import ConfigurationMissingError, MailDeliveryError
from intake.models.mail import MailMessage

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class Mailer(Protocol):
    def send(self, message: MailMessage) -> None:
        ...


# ---------------------------------------------------------------------------
# SendGrid
# ---------------------------------------------------------------------------

class SendGridMailer:
    """Deliver mail through SendGrid's /v3/mail/send endpoint."""

    def __init__(self, api_key: str, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.timeout = timeout

    @staticmethod
    def build_payload(message: MailMessage) -> dict[str, Any]:
        """
        Translate a MailMessage into SendGrid's JSON body.

        text/plain must precede text/html in content. Click tracking is
        disabled so applicant links reach the studio unrewritten.
        """
        sender: dict[str, str] = {"email": message.from_email}
        if message.from_name:
            sender["name"] = message.from_name

        content = [{"type": "text/plain", "value": message.text}]
        if message.html:
            content.append({"type": "text/html", "value": message.html})

        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": sender,
            "subject": message.subject,
            "content": content,
            "tracking_settings": {
                "click_tracking": {"enable": False, "enable_text": False},
            },
        }
        if message.reply_to:
            reply_to = {"email": message.reply_to}
            if message.reply_to_name:
                reply_to["name"] = message.reply_to_name
            payload["reply_to"] = reply_to
        return payload

    def send(self, message: MailMessage) -> None:
        try:
            response = httpx.post(
                SENDGRID_SEND_URL,
                json=self.build_payload(message),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.error("SendGrid request to deliver %r failed: %s", message.subject, exc)
            raise MailDeliveryError(f"SendGrid request failed ({exc.__class__.__name__})") from exc

        if response.status_code >= 300:
            logger.error(
                "SendGrid rejected %r with HTTP %s: %s",
                message.subject,
                response.status_code,
                response.text[:500],
            )
            raise MailDeliveryError(f"SendGrid responded with HTTP {response.status_code}")


# ---------------------------------------------------------------------------
# SMTP
# ---------------------------------------------------------------------------

class SmtpMailer:
    """Deliver mail through an SMTP relay (port 465 -> SSL, otherwise STARTTLS)."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    @staticmethod
    def build_message(message: MailMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = formataddr((message.from_name or "", message.from_email))
        msg["To"] = message.to
        if message.reply_to:
            msg["Reply-To"] = formataddr((message.reply_to_name or "", message.reply_to))
        msg.set_content(message.text)
        if message.html:
            msg.add_alternative(message.html, subtype="html")
        return msg

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        client.ehlo()
        if client.has_extn("starttls"):
            client.starttls(context=context)
            client.ehlo()
        return client

    def send(self, message: MailMessage) -> None:
        try:
            msg = self.build_message(message)
            with self._connect() as client:
                if self.user and self.password:
                    client.login(self.user, self.password)
                client.send_message(msg)
        # ValueError: a header value the email package refuses, e.g. an embedded newline
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            logger.error("SMTP delivery of %r via %s:%s failed: %s", message.subject, self.host, self.port, exc)
            raise MailDeliveryError(f"SMTP delivery failed ({exc.__class__.__name__})") from exc


# ---------------------------------------------------------------------------
# Log-only
# ---------------------------------------------------------------------------

class LogMailer:
    """Write messages to the log instead of sending them."""

    def send(self, message: MailMessage) -> None:
        logger.info(
            "[mail:log] to=%s reply_to=%s subject=%r\n%s",
            message.to,
            message.reply_to,
            message.subject,
            message.text,
        )


# ---------------------------------------------------------------------------
# Registry and factory
# ---------------------------------------------------------------------------

def _build_sendgrid(config: IntakeConfig) -> Mailer:
    if not config.sendgrid_api_key:
        raise ConfigurationMissingError("SENDGRID_API_KEY not configured")
    return SendGridMailer(config.sendgrid_api_key, timeout=config.mail_timeout_seconds)


def _build_smtp(config: IntakeConfig) -> Mailer:
    if not config.smtp_host:
        raise ConfigurationMissingError("SMTP_HOST not configured")
    return SmtpMailer(
        host=config.smtp_host,
        port=config.smtp_port,
        user=config.smtp_user,
        password=config.smtp_password,
        timeout=config.mail_timeout_seconds,
    )


def _build_log(config: IntakeConfig) -> Mailer:
    return LogMailer()


_BUILDERS: dict[str, Callable[[IntakeConfig], Mailer]] = {
    "sendgrid": _build_sendgrid,
    "smtp": _build_smtp,
    "log": _build_log,
}


def build_mailer(config: IntakeConfig) -> Mailer:
    """
    Build the transport named by config.mail_provider.

    Raises ConfigurationMissingError for unknown providers or when the
    chosen provider's credentials are not configured.
    """
    provider = (config.mail_provider or "").lower().strip()
    builder = _BUILDERS.get(provider)
    if builder is None:
        raise ConfigurationMissingError(
            f"Unknown mail provider {provider!r}. "
            f"Supported providers: {sorted(_BUILDERS)}"
        )
    return builder(config)
