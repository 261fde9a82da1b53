from core.settings import Settings

# Settings singleton
_settings = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure startup() was called."
    return _settings


def init_settings(settings: Settings | None = None):
    """Initialize settings singleton, optionally with an explicit instance."""
    global _settings
    _settings = settings or Settings()


def clear_settings():
    """Clear settings singleton."""
    global _settings
    _settings = None


def get_paypal_service():
    """Dependency that provides a PayPal service bound to the current settings."""
    from payments.paypal_service import PayPalService

    return PayPalService(get_settings())
