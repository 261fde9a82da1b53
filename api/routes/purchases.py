"""
Checkout initiation endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.schemas import RedirectOut
from core.dependencies import get_paypal_service
from core.metrics import purchases_initiated
from payments.paypal_service import PayPalService
from payments.purchase import PurchaseRequest

router = APIRouter()


@router.post("", response_model=RedirectOut)
def create_purchase(
    body: PurchaseRequest, service: PayPalService = Depends(get_paypal_service)
):
    """Return the redirect instruction for a PayPal checkout."""
    response = service.purchase(body)
    purchases_initiated.inc()
    return RedirectOut(
        is_successful=response.is_successful,
        is_redirect=response.is_redirect,
        redirect_url=response.redirect_url,
        redirect_method=response.redirect_method,
        redirect_data=response.redirect_data,
    )


@router.post("/checkout", response_class=HTMLResponse)
def checkout_form(
    body: PurchaseRequest, service: PayPalService = Depends(get_paypal_service)
):
    """Return an auto-submitting form that posts the buyer to PayPal."""
    response = service.purchase(body)
    purchases_initiated.inc()
    return HTMLResponse(content=response.to_html_form())
