"""
Webhook handlers for payment providers
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from api.schemas import NotificationAck
from core.dependencies import get_paypal_service
from core.metrics import ipn_notifications
from payments.exceptions import InvalidResponseError, MalformedPayloadError
from payments.paypal_service import PayPalService

router = APIRouter()


@router.post("/webhook/paypal/ipn", response_model=NotificationAck)
async def paypal_ipn(
    request: Request, service: PayPalService = Depends(get_paypal_service)
):
    # PayPal keeps re-sending an IPN until it gets a 200, so rejections are
    # acknowledged too; only a completed purchase may be fulfilled
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="empty notification")

    try:
        purchase = await run_in_threadpool(service.complete_purchase, body)
    except InvalidResponseError as e:
        ipn_notifications.labels(outcome="rejected").inc()
        return NotificationAck(status="rejected", reason=e.reason.name)
    except MalformedPayloadError as e:
        ipn_notifications.labels(outcome="malformed").inc()
        return NotificationAck(
            status="rejected", reason="MALFORMED_PAYLOAD", field=e.field
        )

    ipn_notifications.labels(outcome="completed").inc()
    return NotificationAck(status="completed", purchase=purchase)
