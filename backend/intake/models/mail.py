"""
Provider-agnostic outbound email model.

The pipeline builds MailMessage instances; only the transport classes in
services/mailer.py know how SendGrid or SMTP want them laid out.
"""

from typing import Optional
from pydantic import BaseModel


class MailMessage(BaseModel):
    """A single outbound email with plain-text and HTML alternatives."""

    to: str
    from_email: str
    from_name: Optional[str] = None
    subject: str
    text: str
    html: Optional[str] = None
    reply_to: Optional[str] = None
    reply_to_name: Optional[str] = None
