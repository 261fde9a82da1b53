"""
PayPal Purchase

Builds the Website Payments Standard field set for a purchase and the
redirect instruction that hands the buyer's browser over to PayPal.
"""

from decimal import Decimal
from html import escape
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CHECKOUT_URL = "https://www.paypal.com/cgi-bin/webscr"


class PurchaseRequest(BaseModel):
    """Merchant side description of a purchase."""

    transaction_id: str = Field(min_length=1)
    description: str
    amount: Decimal = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    return_url: str | None = None
    cancel_url: str | None = None
    notify_url: str | None = None

    def get_data(self, business: str) -> dict[str, str]:
        """PayPal `_xclick` form fields for this purchase."""
        data = {
            "cmd": "_xclick",
            "business": business,
            "item_number": self.transaction_id,
            "item_name": self.description,
            "amount": f"{self.amount:.2f}",
            "currency_code": self.currency.upper(),
            "rm": "2",
            "no_note": "1",
            "no_shipping": "1",
            "charset": "utf-8",
        }
        if self.return_url:
            data["return"] = self.return_url
        if self.cancel_url:
            data["cancel_return"] = self.cancel_url
        if self.notify_url:
            data["notify_url"] = self.notify_url
        return data


class PurchaseResponse(BaseModel):
    """Redirect instruction for an initiated, not yet completed, purchase."""

    data: dict[str, Any]

    model_config = ConfigDict(frozen=True)

    @property
    def is_successful(self) -> bool:
        return False

    @property
    def is_redirect(self) -> bool:
        return True

    @property
    def redirect_url(self) -> str:
        return CHECKOUT_URL

    @property
    def redirect_method(self) -> str:
        return "POST"

    @property
    def redirect_data(self) -> dict[str, Any]:
        return self.data

    def to_html_form(self) -> str:
        """Self-submitting HTML form that performs the POST hand-off."""
        inputs = "\n".join(
            f'<input type="hidden" name="{escape(str(name))}" value="{escape(str(value))}" />'
            for name, value in self.redirect_data.items()
        )
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head><title>Redirecting...</title></head>\n"
            '<body onload="document.forms[0].submit();">\n'
            f'<form action="{escape(self.redirect_url)}" method="{self.redirect_method.lower()}">\n'
            f"<p>Redirecting to payment page...</p>\n"
            f"{inputs}\n"
            '<input type="submit" value="Continue" />\n'
            "</form>\n"
            "</body>\n"
            "</html>\n"
        )
