"""
PayPal error taxonomy.

Every rejection of an inbound notification is terminal: nothing is retried
here, PayPal re-sends the IPN on its own schedule.
"""

from enum import Enum


class RejectionReason(str, Enum):
    """Why a verified-looking notification was refused."""

    NOT_VERIFIED = "Not verified"
    TEST_MODE_MISMATCH = "Invalid test mode"
    INVALID_TRANSACTION_STATUS = "Invalid payment status"


class PayPalError(Exception):
    pass


class InvalidResponseError(PayPalError):
    """Raised when a notification fails one of the validation checks."""

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.value)
        self.reason = reason


class MalformedPayloadError(PayPalError):
    """Raised when a required notification field is missing or unreadable."""

    def __init__(self, field: str, detail: str | None = None):
        message = f"Missing or unreadable field: {field}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.field = field
