"""Startup-time logging of the relay configuration."""

from payrelay.common.config import RelaySettings
from payrelay.common.logging import logger


SECRET_MARKERS = ("key", "secret", "password", "token")


def redacted_config(config: RelaySettings) -> dict:
    """Settings as a plain dict with secret-looking values masked."""

    values = config.model_dump()
    for name, value in values.items():
        if value and any(marker in name for marker in SECRET_MARKERS):
            values[name] = "<redacted>"
    values["paystack_mode"] = config.paystack_mode
    return values


def log_startup_config(config: RelaySettings) -> None:
    """Log the effective config; a missing Paystack key is loud but not fatal."""

    logger.info("startup_config=%s", redacted_config(config))
    if not config.paystack_secret_key:
        logger.error("PAYSTACK_SECRET_KEY is required in environment variables")
