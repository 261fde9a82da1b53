from typing import Any

import requests
import structlog
import tenacity

from core.logging import BusinessEvents
from core.settings import Settings
from payments.complete_purchase import CompletedPurchase
from payments.exceptions import InvalidResponseError, MalformedPayloadError
from payments.notification import (
    RESULT_KEY,
    VerificationResult,
    parse_notification,
)
from payments.purchase import PurchaseRequest, PurchaseResponse

VALIDATE_PREFIX = b"cmd=_notify-validate&"

log = structlog.get_logger(__name__)


class PayPalService:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.business = self.settings.PAYPAL_BUSINESS
        self.test_mode = self.settings.PAYPAL_TEST_MODE
        self.verify_url = self.settings.ipn_verify_url
        self.timeout = self.settings.PAYPAL_VERIFY_TIMEOUT

    def purchase(self, request: PurchaseRequest) -> PurchaseResponse:
        """Build the redirect that sends the buyer to PayPal checkout."""
        values = {
            "return_url": self.settings.PAYPAL_RETURN_URL,
            "cancel_url": self.settings.PAYPAL_CANCEL_URL,
            "notify_url": self.settings.PAYPAL_NOTIFY_URL,
        }
        defaults = {
            key: value
            for key, value in values.items()
            if value and getattr(request, key) is None
        }
        if defaults:
            request = request.model_copy(update=defaults)

        response = PurchaseResponse(data=request.get_data(self.business))
        log.info(
            BusinessEvents.PURCHASE_REDIRECT,
            transaction_id=request.transaction_id,
            amount=f"{request.amount:.2f}",
            currency=request.currency.upper(),
            test_mode=self.test_mode,
        )
        return response

    @tenacity.retry(
        retry=tenacity.retry_if_exception_type(requests.RequestException),
        stop=tenacity.stop_after_attempt(3),
        wait=tenacity.wait_exponential(multiplier=0.2, max=2),
        reraise=True,
    )
    def _post_validation(self, raw_body: bytes) -> str:
        r = requests.post(
            self.verify_url,
            data=VALIDATE_PREFIX + raw_body,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": "paypal-ipn-listener",
            },
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.text.strip()

    def verify(self, raw_body: bytes) -> VerificationResult:
        """
        Echo an IPN body back to PayPal and report what PayPal thinks of it.

        Transport failures are retried, then reported as UNVERIFIED.
        """
        try:
            answer = self._post_validation(raw_body)
        except requests.RequestException as e:
            log.error(
                BusinessEvents.IPN_VERIFICATION_FAILED,
                verify_url=self.verify_url,
                error=str(e),
            )
            return VerificationResult.UNVERIFIED

        if answer == VerificationResult.VERIFIED.value:
            return VerificationResult.VERIFIED
        if answer == VerificationResult.INVALID.value:
            return VerificationResult.INVALID

        log.warning(
            BusinessEvents.IPN_VERIFICATION_FAILED,
            verify_url=self.verify_url,
            answer=answer[:100],
        )
        return VerificationResult.UNVERIFIED

    def complete_purchase(self, raw_body: bytes) -> CompletedPurchase:
        """
        Verify an IPN body and turn it into a CompletedPurchase.

        Raises:
            InvalidResponseError: the notification was rejected
            MalformedPayloadError: a required field is missing or unreadable
        """
        payload: dict[str, Any] = parse_notification(raw_body)
        log.info(
            BusinessEvents.IPN_RECEIVED,
            txn_id=payload.get("txn_id"),
            item_number=payload.get("item_number"),
            payment_status=payload.get("payment_status"),
        )

        payload[RESULT_KEY] = self.verify(raw_body)

        try:
            purchase = CompletedPurchase.from_notification(
                payload, request_test_mode=self.test_mode
            )
        except InvalidResponseError as e:
            log.warning(
                BusinessEvents.IPN_REJECTED,
                txn_id=payload.get("txn_id"),
                reason=e.reason.name,
            )
            raise
        except MalformedPayloadError as e:
            log.error(
                BusinessEvents.IPN_MALFORMED,
                txn_id=payload.get("txn_id"),
                field=e.field,
                error=str(e),
            )
            raise

        log.info(
            BusinessEvents.IPN_COMPLETED,
            transaction_id=purchase.transaction_id,
            transaction_reference=purchase.transaction_reference,
            amount=purchase.amount,
            currency=purchase.currency,
            test_mode=purchase.test_mode,
        )
        return purchase
