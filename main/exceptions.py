"""
Project-wide API error handling.

Every error response uses one of two bodies:
    {"errors": {"field": "message"}}   field validation failures
    {"message": "..."}                 everything else
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Internal server error'
UNAUTHORIZED_MESSAGE = 'Unauthorized'


class BadRequest(exceptions.APIException):
    """A well-formed request that cannot be honoured (unknown role, bad owner)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request'
    default_code = 'bad_request'


class Conflict(exceptions.APIException):
    """The request collides with existing data (duplicate email, duplicate rating)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists'
    default_code = 'conflict'


def _first_message(detail):
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    if isinstance(detail, dict):
        return _first_message(next(iter(detail.values()), ''))
    return str(detail)


def flatten_errors(detail):
    """Reduce DRF's {field: [messages]} to {field: first message}."""
    return {field: _first_message(messages) for field, messages in detail.items()}


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        return Response(
            {'message': INTERNAL_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        response.data = {'errors': flatten_errors(exc.detail)}
    elif isinstance(exc, exceptions.NotAuthenticated):
        response.data = {'message': UNAUTHORIZED_MESSAGE}
    else:
        response.data = {'message': _first_message(response.data)}

    return response
