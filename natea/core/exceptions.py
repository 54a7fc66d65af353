import logging

from rest_framework import exceptions
from rest_framework.views import exception_handler

from .errors import SIGN_IN_REQUIRED, INSUFFICIENT_PERMISSIONS, normalize_error_message

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    REST framework exception handler that adds user-facing error text.

    Authentication and permission failures get the fixed sign-in/permission
    titles. Other errors carrying a ``detail`` string are run through
    ``normalize_error_message``. Field validation errors are returned as-is.
    """
    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return None

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        normalized = SIGN_IN_REQUIRED
    elif isinstance(exc, exceptions.PermissionDenied):
        normalized = INSUFFICIENT_PERMISSIONS
    elif isinstance(exc, exceptions.ValidationError):
        return response
    else:
        normalized = normalize_error_message(getattr(exc, 'detail', exc))

    if isinstance(response.data, dict):
        response.data.update(normalized.as_dict())
    return response
