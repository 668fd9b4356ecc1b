"""
Testing Helpers
~~~~~~~~~~~~~~~

Collection of Mocks and Tools for testing applications that receive signed
Facebook requests.

"""
# Imports to support typing
from typing import Dict, Mapping  # noqa

from . import signing
from .constants import SIGNATURE_PREFIX
from .data_structures import BaseHttpRequest


class MockRequest(BaseHttpRequest):
    """
    Mocked Request object.
    """
    def __init__(self, method='POST', form=None, cookies=None, environ=None):
        # type: (str, dict, dict, dict) -> None
        self._method = method
        self._form = dict(form or {})
        self._cookies = dict(cookies or {})
        self._environ = dict(environ or {})

    @property
    def environ(self):
        return self._environ

    @property
    def method(self):
        return self._method

    @method.setter
    def method(self, value):
        self._method = value

    @property
    def form(self):
        return self._form

    @form.setter
    def form(self, value):
        self._form = dict(value)

    @property
    def cookies(self):
        return self._cookies


def sign_params(params, secret_key, prefix=SIGNATURE_PREFIX):
    # type: (Mapping[str, str], str, str) -> Dict[str, str]
    """
    Sign form params as Facebook would.
    """
    return signing.sign_fields(params, secret_key, prefix)


def sign_cookies(cookies, secret_key, api_key):
    # type: (Mapping[str, str], str, str) -> Dict[str, str]
    """
    Sign cookies as Facebook would; the signature is stored in a cookie named
    after the API key.
    """
    return signing.sign_fields(cookies, secret_key, api_key)
