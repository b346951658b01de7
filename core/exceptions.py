import logging

from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the payment provider rejects or fails a request."""

    def __init__(self, message, response_data=None):
        super().__init__(message)
        self.message = message
        self.response_data = response_data or {}


def api_exception_handler(exc, context):
    """DRF's default handler, with permission denials logged as security notices."""
    response = exception_handler(exc, context)
    if isinstance(exc, exceptions.PermissionDenied):
        request = context.get('request')
        view = context.get('view')
        user = getattr(request, 'user', None)
        logger.warning(
            f"Security notice: {request.method if request else '?'} "
            f"{request.path if request else '?'} denied for user "
            f"{getattr(user, 'pk', None)} on {view.__class__.__name__ if view else '?'}: {exc.detail}"
        )
    return response
