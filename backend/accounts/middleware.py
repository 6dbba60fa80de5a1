from __future__ import annotations

from .session import ConsoleSession


class ConsoleSessionMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.console = ConsoleSession.hydrate(request)
        return self.get_response(request)
