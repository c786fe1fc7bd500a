import os

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URL", "memory://"),
    strategy="fixed-window",
    default_limits=["200 per hour"],
)


def per_ip_limit(config_key, error_message):
    """Per-IP route limit whose rate string is read from ``config_key`` per request."""
    return limiter.limit(
        lambda: current_app.config[config_key],
        key_func=get_remote_address,
        error_message=error_message,
    )
