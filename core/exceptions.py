import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        # unexpected: full detail goes to the log only
        request = context.get('request')
        logger.exception("Unhandled error on %s", getattr(request, 'path', '?'))
        return Response(
            {'success': False, 'error': 'Internal server error', 'code': 'server_error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    code = 'api_error'
    if isinstance(exc, APIException):
        codes = exc.get_codes()
        code = codes if isinstance(codes, str) else _first_message(codes) or code
    payload = {'success': False, 'error': _first_message(exc.detail if isinstance(exc, APIException) else resp.data),
               'code': code}
    if isinstance(resp.data, dict) and set(resp.data) - {'detail'}:
        # field-level validation errors
        payload['fields'] = resp.data
    return Response(payload, status=resp.status_code, headers={k: v for k, v in resp.items()})
