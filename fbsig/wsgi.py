"""
WSGI
~~~~

WSGI middleware that verifies signed Facebook requests before they reach the
application.

Usage::

    from fbsig.wsgi import FacebookMiddleware

    application = FacebookMiddleware(application, "my_facebook_secret_key", api_key="my_api_key")

Using a condition::

    application = FacebookMiddleware(
        application, "my_facebook_secret_key",
        condition=lambda environ: environ['PATH_INFO'].startswith('/facebook_only')
    )

"""
import io
import logging

from http.cookies import SimpleCookie, CookieError
from urllib.parse import parse_qsl, unquote_plus, urlencode

# Typing imports
from typing import Any, Callable, Dict, Iterable  # noqa

from .data_structures import BaseHttpRequest, HttpResponse
from .exceptions import ImmediateHttpResponse
from .middleware import FacebookAuth

__all__ = ('WsgiRequest', 'FacebookMiddleware')

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


class WsgiRequest(BaseHttpRequest):
    """
    Request backed by a WSGI environ.

    Reading the form consumes ``wsgi.input``, the body is replaced so the
    wrapped application can still read it.

    Assigning the form rewrites the body segment by segment; segments whose
    field name is no longer in the form are removed and any new fields are
    appended. All other segments are passed on byte for byte so repeated
    fields and their encoding are preserved.

    Only ``application/x-www-form-urlencoded`` bodies are read, the form of a
    ``multipart/form-data`` request is empty so a signature sent in a
    multipart body is not verified.
    """
    def __init__(self, environ):
        # type: (Dict[str, Any]) -> None
        self._environ = environ
        self._body = None
        self._form = None
        self._cookies = None

    @property
    def environ(self):
        return self._environ

    @property
    def method(self):
        return self._environ.get('REQUEST_METHOD', 'GET')

    @method.setter
    def method(self, value):
        self._environ['REQUEST_METHOD'] = value

    @property
    def is_form(self):
        # type: () -> bool
        content_type = self._environ.get('CONTENT_TYPE', '')
        return content_type.split(';')[0].strip().lower() == FORM_CONTENT_TYPE

    @property
    def body(self):
        # type: () -> bytes
        if self._body is None:
            environ = self._environ
            try:
                length = int(environ.get('CONTENT_LENGTH') or 0)
            except ValueError:
                length = 0

            if length > 0:
                self._body = environ['wsgi.input'].read(length)
                environ['wsgi.input'] = io.BytesIO(self._body)
            else:
                self._body = b''
        return self._body

    def _write_body(self, body):
        # type: (bytes) -> None
        self._body = body
        self._environ['wsgi.input'] = io.BytesIO(body)
        self._environ['CONTENT_LENGTH'] = str(len(body))

    @property
    def form(self):
        if self._form is None:
            if self.is_form:
                self._form = dict(parse_qsl(self.body.decode('UTF8', 'replace'), keep_blank_values=True))
            else:
                self._form = {}
        return self._form

    @form.setter
    def form(self, value):
        current = self.form
        value = dict(value)

        segments = [s for s in self.body.split(b'&') if segment_name(s) in value]
        added = [(k, v) for k, v in value.items() if k not in current]
        if added:
            segments.append(urlencode(added).encode('UTF8'))

        self._form = value
        self._write_body(b'&'.join(segments))

    @property
    def cookies(self):
        if self._cookies is None:
            cookie = SimpleCookie()
            try:
                cookie.load(self._environ.get('HTTP_COOKIE', ''))
            except CookieError:
                logger.debug("Unable to parse cookie header.")
            self._cookies = {k: m.value for k, m in cookie.items()}
        return self._cookies


def segment_name(segment):
    # type: (bytes) -> str
    """
    Decode the field name of a raw ``name=value`` body segment, the same way
    :func:`urllib.parse.parse_qsl` decodes it.
    """
    name = segment.split(b'=', 1)[0]
    return unquote_plus(name.decode('UTF8', 'replace'), errors='replace')


class FacebookMiddleware(object):
    """
    WSGI middleware that checks the signature of Facebook params and
    publishes them into the environ (eg ``environ['facebook.in_canvas']``).

    If the signature is wrong a "400 Invalid Facebook signature" response is
    returned without calling the application.

    :param app: WSGI application to wrap.
    :param application_secret: Secret shared with Facebook.
    :param api_key: Application API key; required to verify signed cookies.
    :param application_name: Name of the application.
    :param condition: Callable that receives the WSGI environ and returns
        `True` when the request should be verified.
    :param options: Additional options passed to :class:`FacebookAuth`.

    """
    def __init__(self, app, application_secret, api_key=None, application_name=None, condition=None, **options):
        # type: (Callable, str, str, str, Callable[[Dict[str, Any]], bool], **Any) -> None
        self.app = app
        if condition is not None:
            options['condition'] = lambda request: condition(request.environ)
        self.auth = FacebookAuth(application_secret, api_key, application_name, **options)

    def __call__(self, environ, start_response):
        # type: (Dict[str, Any], Callable) -> Iterable[bytes]
        request = WsgiRequest(environ)
        try:
            self.auth.pre_dispatch(request, None)
        except ImmediateHttpResponse as e:
            return self.respond(HttpResponse(e.resource, e.status, e.headers), start_response)

        return self.app(environ, start_response)

    @staticmethod
    def respond(response, start_response):
        # type: (HttpResponse, Callable) -> Iterable[bytes]
        body = response.body or b''
        if not isinstance(body, bytes):
            body = str(body).encode('UTF8')

        headers = list(response.headers.items())
        headers.append(('Content-Length', str(len(body))))
        start_response(response.status_line, headers)
        return [body]
