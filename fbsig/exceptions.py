# -*- coding: utf-8 -*-
"""
Exceptions
~~~~~~~~~~

"""
from .constants import HTTPStatus, INVALID_SIGNATURE_MESSAGE

__all__ = ('ImmediateHttpResponse', 'InvalidSignature', 'SigningError')


class ImmediateHttpResponse(Exception):
    """
    A response that should be returned immediately.
    """
    def __init__(self, resource, status=HTTPStatus.OK, headers=None):
        self.resource = resource
        self.status = status
        self.headers = headers


class InvalidSignature(ImmediateHttpResponse):
    """
    The signature supplied with a request does not match the signed fields.
    """
    def __init__(self):
        super(InvalidSignature, self).__init__(
            INVALID_SIGNATURE_MESSAGE, HTTPStatus.BAD_REQUEST, {'Content-Type': 'text/html'}
        )


class SigningError(Exception):
    """
    Error raised during a signing operation
    """
