"""
DRF exception handler that renders service-layer errors.

Registered as ``REST_FRAMEWORK['EXCEPTION_HANDLER']``. Any ``LedgerError``
raised from a view (usually bubbling up from a service call) becomes::

    {"error": "<message>", "code": "<default_code>"}

with the error's ``status_code``. Everything else is left to DRF.
"""

import structlog
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import LedgerError, PersistenceError

logger = structlog.get_logger(__name__)


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerError):
        if isinstance(exc, PersistenceError):
            view = context.get('view')
            logger.error(
                "persistence_error",
                view=view.__class__.__name__ if view else None,
                error=str(exc),
            )
        return Response(
            {'error': str(exc), 'code': exc.default_code},
            status=exc.status_code,
        )

    return exception_handler(exc, context)
