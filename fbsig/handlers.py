"""
Handlers
~~~~~~~~

Wrap an application handler with middleware.

"""
import logging

# Imports for typing support
from typing import Any, Callable, Dict, List  # noqa

from .data_structures import HttpResponse, MiddlewareList
from .exceptions import ImmediateHttpResponse

__all__ = ('Handler',)

logger = logging.getLogger(__name__)


class Handler(object):
    """
    Decorator that places middleware in front of a handler.

    Usage::

        @Handler(middleware=[FacebookAuth('my_facebook_secret_key')])
        def canvas(request):
            ...
            return HttpResponse("Hello")

    The handler is called exactly once per request unless a middleware
    responds immediately by raising :class:`ImmediateHttpResponse`.

    """
    def __new__(cls, func=None, *args, **kwargs):
        def inner(callback):
            instance = super(Handler, cls).__new__(cls)
            instance.__init__(callback, *args, **kwargs)
            return instance
        return inner(func) if func else inner

    def __init__(self, callback, middleware=None):
        # type: (Callable, List[Any]) -> None
        self.callback = callback
        self.middleware = MiddlewareList(middleware or [])

    def __call__(self, request, path_args=None):
        # type: (Any, Dict[str, Any]) -> Any
        """
        Main wrapper around the handler callback function.
        """
        path_args = {} if path_args is None else path_args
        try:
            # path_args is passed by ref so changes can be made.
            for middleware in self.middleware.pre_dispatch:
                middleware(request, path_args)

            response = self.callback(request, **path_args)

            for middleware in self.middleware.post_dispatch:
                response = middleware(request, response)

        except ImmediateHttpResponse as e:
            # An exception used to return a response immediately, skipping any
            # further processing.
            logger.debug("Immediate response from %s: %s", self, e.status)
            return HttpResponse(e.resource, e.status, e.headers)

        return response

    def __repr__(self):
        return "Handler({!r})".format(self.callback)

