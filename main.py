"""
PayPal IPN Service - Main Application Entry Point

This module initializes the FastAPI application: checkout initiation that
hands buyers to PayPal, and the IPN listener that turns PayPal's
notifications into completed purchases.
"""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from api import routes, webhooks
from api.middleware import log_api_entry
from core.dependencies import clear_settings, get_settings, init_settings
from core.logging import configure_logging
from core.metrics import init_metrics
from core.settings import Settings

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    # Startup
    init_settings()
    settings = get_settings()
    log.info(
        "app.startup",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        test_mode=settings.PAYPAL_TEST_MODE,
    )
    yield
    # Shutdown
    clear_settings()


app = FastAPI(
    title="PayPal IPN Service",
    description="""
    ## PayPal Website Payments Standard integration

    - **Checkout**: build the redirect that hands the buyer to PayPal
    - **IPN listener**: verify notifications with PayPal and accept only
      completed payments from the expected environment
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Initialize Prometheus metrics
init_metrics(app)

# Add logging middleware
app.middleware("http")(log_api_entry)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error("api.unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


@app.get("/healthz")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "test_mode": settings.PAYPAL_TEST_MODE,
    }


# Include routers under a single versioned prefix
API_PREFIX = "/api/v1"

app.include_router(routes.router, prefix=API_PREFIX)
app.include_router(webhooks.router, prefix="/api", tags=["webhooks"])


def main():
    configure_logging()
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
