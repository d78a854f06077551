"""
Error taxonomy and DRF exception handler.

Services raise these exceptions; views let them propagate and the
handler below renders a consistent ``{"error": ..., "details": ...}``
body. Validation failures are raised before any storage access.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be processed.'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed input or a violated invariant (e.g. age_from > age_to)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid input.'


class NotFoundError(DomainError):
    """A referenced profile, edge, image or review does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found.'


class ConflictError(DomainError):
    """The target is in a state that forbids the operation."""
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Operation conflicts with the current state.'


class StorageError(DomainError):
    """Transport or query failure. The message stays opaque to clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Storage failure.'


def _error_response(message, status_code, details=None):
    body = {'error': message}
    if details:
        body['details'] = details
    return Response(body, status=status_code)


def api_exception_handler(exc, context):
    """
    REST_FRAMEWORK['EXCEPTION_HANDLER'] entry point.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, DomainError):
        if isinstance(exc, StorageError):
            logger.error('Storage failure in %s: %s', view_name, exc.message, exc_info=exc)
        return _error_response(exc.message, exc.status_code, exc.details)

    if isinstance(exc, DatabaseError):
        logger.error('Database error in %s', view_name, exc_info=exc)
        wrapped = StorageError()
        return _error_response(wrapped.message, wrapped.status_code)

    if isinstance(exc, ObjectDoesNotExist):
        return _error_response(NotFoundError.default_message, status.HTTP_404_NOT_FOUND)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and set(data.keys()) == {'detail'}:
        response.data = {'error': str(data['detail'])}
    else:
        response.data = {'error': ValidationError.default_message, 'details': data}
    return response
