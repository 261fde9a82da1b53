"""
PayPal Complete Purchase

Turns a verified IPN payload into a CompletedPurchase. The factory is the
only way to obtain one: it runs the authenticity, test mode and payment
status checks in order and stops at the first failure.
"""

from typing import Mapping

from pydantic import BaseModel, ConfigDict

from payments.exceptions import (
    InvalidResponseError,
    MalformedPayloadError,
    RejectionReason,
)
from payments.notification import (
    RESULT_KEY,
    VerificationResult,
    first_non_empty,
    is_flag_set,
    parse_payment_date,
    require,
)

COMPLETED_STATUS = "Completed"


class CompletedPurchase(BaseModel):
    """A notification that passed every check."""

    transaction_id: str
    transaction_reference: str
    amount: str
    fee: str
    currency: str
    payer: str
    time: str
    test_mode: bool

    model_config = ConfigDict(frozen=True)

    @property
    def is_successful(self) -> bool:
        return True

    @classmethod
    def from_notification(
        cls, payload: Mapping[str, str], request_test_mode: bool
    ) -> "CompletedPurchase":
        """
        Validate `payload` and extract the purchase facts from it.

        Args:
            payload: Decoded IPN fields with the verification result under RESULT_KEY
            request_test_mode: Test mode of the request that started the purchase

        Raises:
            InvalidResponseError: verification, test mode or status check failed
            MalformedPayloadError: a required field is missing or unreadable
        """
        if payload.get(RESULT_KEY) != VerificationResult.VERIFIED:
            raise InvalidResponseError(RejectionReason.NOT_VERIFIED)

        test_mode = is_flag_set(payload.get("test_ipn"))
        if request_test_mode != test_mode:
            raise InvalidResponseError(RejectionReason.TEST_MODE_MISMATCH)

        if require(payload, "payment_status") != COMPLETED_STATUS:
            raise InvalidResponseError(RejectionReason.INVALID_TRANSACTION_STATUS)

        return cls(
            transaction_id=require(payload, "item_number"),
            transaction_reference=require(payload, "txn_id"),
            amount=first_non_empty(payload, "payment_gross", "mc_gross"),
            fee=first_non_empty(payload, "payment_fee", "mc_fee"),
            currency=require(payload, "mc_currency").upper(),
            payer=_payer(payload),
            time=_payment_time(payload),
            test_mode=test_mode,
        )


def _payer(payload: Mapping[str, str]) -> str:
    # Informational only, so absent parts stay empty
    return f"{payload.get('address_name', '')}/{payload.get('payer_email', '')}"


def _payment_time(payload: Mapping[str, str]) -> str:
    value = require(payload, "payment_date")
    try:
        return parse_payment_date(value).isoformat()
    except ValueError as exc:
        raise MalformedPayloadError("payment_date", str(exc)) from exc
