"""Turns any exception into a (status, body) pair for an outer surface.

Domain errors carry their own code, status and details. Anything else is
logged and reported as a generic internal error, with nothing from the
exception leaking into the body.
"""

from __future__ import annotations

import logging

from stockroom.domain.exceptions import DomainException
from stockroom.infrastructure.config import Settings

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


def catch_error(exc: Exception, settings: Settings) -> tuple[int, dict]:
    if isinstance(exc, DomainException):
        body: dict = {"error": exc.code, "message": str(exc)}
        if exc.details:
            body["details"] = exc.details
        return exc.status, body

    if settings.is_production:
        logger.error("Unhandled error: %s", exc.__class__.__name__)
    else:
        logger.exception("Unhandled error", exc_info=exc)
    return 500, {"error": INTERNAL_SERVER_ERROR}
