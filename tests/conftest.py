"""Test configuration and fixtures."""

import os
from urllib.parse import urlencode

import pytest
import requests
from fastapi.testclient import TestClient

# Must be set before core.logging configures structlog on import
os.environ.setdefault("ENVIRONMENT", "test")

from core.settings import Settings  # noqa: E402
from main import app  # noqa: E402
from payments.notification import RESULT_KEY, VerificationResult  # noqa: E402


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    # Store original env vars
    original_env = dict(os.environ)

    os.environ.update(
        {
            "PAYPAL_BUSINESS": "merchant@example.com",
            "PAYPAL_TEST_MODE": "false",
            "APP_NAME": "Test PayPal Service",
            "ENVIRONMENT": "test",
        }
    )

    yield

    # Restore original env vars
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        PAYPAL_BUSINESS="merchant@example.com",
        PAYPAL_TEST_MODE=False,
        APP_NAME="Test PayPal Service",
        ENVIRONMENT="test",
    )


class MockResponse:
    """Custom mock response for the IPN verification endpoint."""

    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


@pytest.fixture
def mock_response():
    """Factory for canned PayPal verification answers."""
    return MockResponse


@pytest.fixture
def ipn_fields():
    """Fields of a completed live-mode IPN as PayPal sends them."""
    return {
        "item_number": "order-42",
        "txn_id": "61E67681CH3238416",
        "payment_status": "Completed",
        "payment_gross": "10.00",
        "mc_gross": "10.00",
        "payment_fee": "0.59",
        "mc_fee": "0.59",
        "mc_currency": "usd",
        "address_name": "Jane Doe",
        "payer_email": "jane@example.com",
        "payment_date": "01:02:03 Jan 04, 2016 PST",
    }


@pytest.fixture
def verified_payload(ipn_fields):
    """IPN fields with a VERIFIED echo-back result injected."""
    return {**ipn_fields, RESULT_KEY: VerificationResult.VERIFIED}


@pytest.fixture
def ipn_body(ipn_fields):
    """Raw form body of the IPN."""
    return urlencode(ipn_fields).encode("ascii")


@pytest.fixture
def client():
    """Test client running the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client
