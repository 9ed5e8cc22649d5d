"""Optional Sentry error reporting."""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "local"


def init_sentry() -> bool:
    """Start Sentry if SENTRY_DSN is configured.

    INFO records become breadcrumbs and ERROR records become events, so a
    failed run reaches Sentry with the log trail that led to it.

    :returns: Whether Sentry was started.
    """
    dsn = os.environ.get("SENTRY_DSN")
    if not dsn:
        logger.debug("SENTRY_DSN not set, error reporting disabled")
        return False

    environment = os.environ.get("APP_ENV", DEFAULT_ENVIRONMENT)
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        send_default_pii=False,
        traces_sample_rate=1.0,
    )
    logger.info(f"Sentry enabled: environment={environment}")
    return True
