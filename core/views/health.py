import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse
from rest_framework.decorators import api_view
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def healthz(request):
    """Orchestrator probe: store mode plus whether the database answers ``SELECT 1``."""
    store = getattr(request, 'store', None)
    body = {'ok': True, 'mode': getattr(store, 'mode', None)}
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        body['db'] = bool(row and row[0] == 1)
    except DatabaseError:
        logger.warning("healthz: database unreachable", exc_info=True)
        body['db'] = False
    # the in-memory store serves without a database
    if body['mode'] == 'database' and not body['db']:
        body['ok'] = False
    return JsonResponse(body, status=200 if body['ok'] else 503)


@api_view(['GET'])
def api_health(request):
    """Liveness probe used by clients to pick a backend; ``mode`` doubles as the offline indicator."""
    return Response({'status': 'Server is healthy', 'mode': request.store.mode})
