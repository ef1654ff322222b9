import logging

from .stores import select_store

logger = logging.getLogger(__name__)


class StoreMiddleware:
    """Attach the store chosen at start-up to every request as ``request.store``."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.store = select_store()
        logger.info("Serving data from the %s store", self.store.mode)

    def __call__(self, request):
        request.store = self.store
        return self.get_response(request)
