"""Per-client request limits, applied with ``@limiter.limit`` on routes.

Limits are read from settings on every request so ``RATE_LIMIT_MAX`` and
``RATE_LIMIT_WINDOW_SECONDS`` can change without rebuilding the app.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from chauffeur_api.core.config import settings

limiter = Limiter(key_func=get_remote_address, strategy="fixed-window")


def inquiry_rate_limit() -> str:
    return f"{max(settings.RATE_LIMIT_MAX, 1)}/{settings.RATE_LIMIT_WINDOW_SECONDS} seconds"


def rate_limit_disabled() -> bool:
    return settings.RATE_LIMIT_MAX <= 0
