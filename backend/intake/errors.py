"""
Exception types raised by the intake services.

The pipeline turns these into tagged SubmissionOutcome values; only the
router knows how an outcome maps onto an HTTP status code.
"""


class IntakeError(Exception):
    """Base class for every error raised inside the intake package."""


class MalformedInputError(IntakeError):
    """The request body could not be parsed under its declared content type."""


class UnknownFormError(IntakeError):
    """No form definition is registered under the requested slug."""


class ConfigurationMissingError(IntakeError):
    """A required setting (e.g. the mail API credential) is not configured."""


class MailDeliveryError(IntakeError):
    """The mail transport rejected or failed to deliver a message."""
