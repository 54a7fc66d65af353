"""
Normalizes error messages into user-facing English titles and messages.

Errors raised deep in the stack (permission checks, cache or database
connectivity, upstream timeouts) carry technical text. The console shows a
short title and sentence instead, chosen by substring matching on the
original message.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedError:
    title: str
    message: str
    is_auth_error: bool

    def as_dict(self):
        return {
            'title': self.title,
            'message': self.message,
            'is_auth_error': self.is_auth_error,
        }


SIGN_IN_REQUIRED = NormalizedError(
    title='Sign In Required',
    message='You need to sign in to access this feature.',
    is_auth_error=True,
)

INSUFFICIENT_PERMISSIONS = NormalizedError(
    title='Insufficient Permissions',
    message='You do not have permission to perform this action.',
    is_auth_error=True,
)

CONNECTION_ERROR = NormalizedError(
    title='Connection Error',
    message='Unable to connect to the service. Please check your connection and try again.',
    is_auth_error=False,
)

NETWORK_ERROR = NormalizedError(
    title='Network Error',
    message='A network error occurred. Please check your internet connection and try again.',
    is_auth_error=False,
)

REQUEST_TIMEOUT = NormalizedError(
    title='Request Timeout',
    message='The request took too long to complete. Please try again.',
    is_auth_error=False,
)

UNEXPECTED_ERROR = NormalizedError(
    title='Error',
    message='An unexpected error occurred. Please try again.',
    is_auth_error=False,
)


def normalize_error_message(error):
    """
    Map an exception (or any object with a useful ``str``) to a NormalizedError.

    Matching is case-insensitive and checked in priority order: authorization,
    service connectivity, network, timeout, then the generic fallback.
    """
    error_message = str(error) if error is not None else ''
    lower_message = error_message.lower()

    if (
        'unauthorized' in lower_message
        or 'only users can' in lower_message
        or 'only admins can' in lower_message
    ):
        if 'only users can' in lower_message or 'only admins can' in lower_message:
            return SIGN_IN_REQUIRED
        return INSUFFICIENT_PERMISSIONS

    if (
        'actor not available' in lower_message
        or 'actor not initialized' in lower_message
        or 'service not ready' in lower_message
    ):
        return CONNECTION_ERROR

    if 'network' in lower_message or 'fetch' in lower_message:
        return NETWORK_ERROR

    if 'timeout' in lower_message:
        return REQUEST_TIMEOUT

    return UNEXPECTED_ERROR
