import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()

IPN_VERIFY_URL = "https://ipnpb.paypal.com/cgi-bin/webscr"
IPN_VERIFY_URL_SANDBOX = "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # PayPal merchant account
    PAYPAL_BUSINESS: str
    PAYPAL_TEST_MODE: bool = False
    PAYPAL_IPN_VERIFY_URL: str | None = None
    PAYPAL_VERIFY_TIMEOUT: float = 30.0

    # Default callback URLs for new purchases
    PAYPAL_NOTIFY_URL: str | None = None
    PAYPAL_RETURN_URL: str | None = None
    PAYPAL_CANCEL_URL: str | None = None

    # App settings
    APP_NAME: str = "PayPal IPN Service"
    ENVIRONMENT: Literal["development", "test", "production"] = "development"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)

    def __init__(self, **kwargs):
        # Check for the merchant account before calling parent constructor
        if not kwargs.get("PAYPAL_BUSINESS") and not os.getenv("PAYPAL_BUSINESS"):
            raise RuntimeError(
                "PAYPAL_BUSINESS not set; create .env or export the variable"
            )
        super().__init__(**kwargs)

    @property
    def ipn_verify_url(self) -> str:
        """Endpoint that answers the IPN echo-back for the configured mode."""
        if self.PAYPAL_IPN_VERIFY_URL:
            return self.PAYPAL_IPN_VERIFY_URL
        return IPN_VERIFY_URL_SANDBOX if self.PAYPAL_TEST_MODE else IPN_VERIFY_URL
