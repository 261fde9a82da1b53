import logging
import sys
import structlog
import os
from opentelemetry.instrumentation.logging import LoggingInstrumentor

# Environments whose logs are shipped somewhere and must be machine-readable
JSON_ENVIRONMENTS = ("test", "production")


def get_environment():
    return os.getenv("ENVIRONMENT", "development")


def get_log_level():
    """Get log level from environment or default to INFO"""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_renderer(env):
    """Get log renderer based on environment"""
    if env in JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)


def build_processors(env):
    """Processor chain shared by every structlog logger of the service."""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if env in JSON_ENVIRONMENTS:
        # Tracebacks go into the event instead of a separate stdout dump
        processors.append(structlog.processors.format_exc_info)
    processors.append(get_log_renderer(env))
    return processors


def configure_logging():
    """Set up structlog on top of stdlib logging with OTEL context injection."""
    env = get_environment()

    structlog.configure(
        processors=build_processors(env),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Tests reconfigure structlog, so loggers must not pin the first config
        cache_logger_on_first_use=env != "test",
    )

    handler = logging.StreamHandler(sys.stdout if env == "test" else None)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(get_log_level())

    # Uvicorn access lines would duplicate the api.request events
    logging.getLogger("uvicorn.error").handlers.clear()
    logging.getLogger("uvicorn.access").handlers.clear()

    LoggingInstrumentor().instrument(set_logging_format=False)


# Business Event Log Names
class BusinessEvents:
    """Standard names for business event logs"""

    API_ENTRY = "api.request"
    PURCHASE_REDIRECT = "purchase.redirect"
    IPN_RECEIVED = "ipn.received"
    IPN_VERIFICATION_FAILED = "ipn.verification_failed"
    IPN_REJECTED = "ipn.rejected"
    IPN_MALFORMED = "ipn.malformed"
    IPN_COMPLETED = "ipn.completed"


# Configure logging when module is imported
configure_logging()
