"""
Honeypot check.

Each form renders one or more hidden inputs that a person never fills in.
Any non-empty value in one of them marks the submission as automated. The
rule is the same for every form; the "looks like a URL" variant some older
handlers used is not kept.
"""

import logging
from typing import Any, Optional

from intake.models.forms import FormDefinition
from intake.services.resolver import stringify

logger = logging.getLogger(__name__)


def tripped_key(raw: dict[str, Any], form: FormDefinition) -> Optional[str]:
    """Return the honeypot key holding a value, or None. Keys match case-insensitively."""
    honeypots = {k.lower() for k in form.honeypot_keys}
    for key, value in raw.items():
        if str(key).lower() in honeypots and value is not False and stringify(value):
            return key
    return None


def is_spam(raw: dict[str, Any], form: FormDefinition) -> bool:
    key = tripped_key(raw, form)
    if key is not None:
        logger.info("Form %r: honeypot %r filled, dropping submission", form.slug, key)
        return True
    return False
