"""
API Schemas Module

This module defines Pydantic models for request/response validation.
"""

from typing import Any, Literal

from pydantic import BaseModel

from payments.complete_purchase import CompletedPurchase


class RedirectOut(BaseModel):
    """Redirect instruction handed to the client for the PayPal checkout."""

    is_successful: bool
    is_redirect: bool
    redirect_url: str
    redirect_method: str
    redirect_data: dict[str, Any]


class NotificationAck(BaseModel):
    """Acknowledgement of a processed IPN."""

    status: Literal["completed", "rejected"]
    reason: str | None = None
    field: str | None = None
    purchase: CompletedPurchase | None = None
