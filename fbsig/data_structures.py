from odin.utils import lazy_property

# Imports for typing support
from typing import Any, AnyStr, Dict, MutableMapping, Mapping, NamedTuple, Optional  # noqa

from .constants import HTTPStatus
from .utils import sort_by_priority

__all__ = ('HttpResponse', 'BaseHttpRequest', 'FacebookSettings', 'MiddlewareList')


class HttpResponse(object):
    """
    Simplified HTTP response
    """
    __slots__ = ('status', 'body', 'headers')

    def __init__(self, body, status=HTTPStatus.OK, headers=None):
        # type: (Any, HTTPStatus, Dict[str, AnyStr]) -> None
        self.body = body
        if isinstance(status, HTTPStatus):
            status = status.value
        self.status = status
        self.headers = headers or {}

    def __getitem__(self, item):
        # type: (str) -> AnyStr
        return self.headers[item]

    def __setitem__(self, key, value):
        # type: (str, AnyStr) -> None
        self.headers[key] = value

    @property
    def status_line(self):
        # type: () -> str
        """
        Status in the form used by a HTTP status line (eg "400 Bad Request").
        """
        try:
            return "{} {}".format(self.status, HTTPStatus(self.status).phrase)
        except ValueError:
            return str(self.status)


class BaseHttpRequest(object):
    """
    Interface a request object must provide to be authenticated.

    The environ is used as a bag for values published by middleware.
    """
    @property
    def environ(self):
        # type: () -> MutableMapping[str, Any]
        raise NotImplementedError

    @property
    def method(self):
        # type: () -> str
        raise NotImplementedError

    @method.setter
    def method(self, value):
        raise NotImplementedError

    @property
    def form(self):
        # type: () -> Mapping[str, str]
        raise NotImplementedError

    @form.setter
    def form(self, value):
        raise NotImplementedError

    @property
    def cookies(self):
        # type: () -> Mapping[str, str]
        raise NotImplementedError


FacebookSettings = NamedTuple('FacebookSettings', [
    ('application_secret', str),
    ('api_key', Optional[str]),
    ('application_name', Optional[str]),
])
FacebookSettings.__new__.__defaults__ = (None, None)


class MiddlewareList(list):
    """
    List of middleware with filtering and sorting builtin.
    """
    @lazy_property
    def pre_dispatch(self):
        """
        List of pre-dispatch methods from registered middleware.
        """
        middleware = sort_by_priority(self)
        return tuple(m.pre_dispatch for m in middleware if hasattr(m, 'pre_dispatch'))

    @lazy_property
    def post_dispatch(self):
        """
        List of post-dispatch methods from registered middleware.
        """
        middleware = sort_by_priority(self, reverse=True)
        return tuple(m.post_dispatch for m in middleware if hasattr(m, 'post_dispatch'))
