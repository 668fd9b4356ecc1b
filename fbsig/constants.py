import enum

from http import HTTPStatus

__all__ = ('HTTPStatus', 'Verification', 'SIGNATURE_PREFIX', 'CONTEXT_PREFIX', 'ORIGINAL_METHOD',
           'REQUEST_METHOD_FIELD', 'INVALID_SIGNATURE_MESSAGE')


class Verification(enum.Enum):
    """
    Outcome of verifying a request.
    """
    NotApplicable = 'not-applicable'
    Valid = 'valid'
    Invalid = 'invalid'


SIGNATURE_PREFIX = 'fb_sig'
"""
Name of the form field holding the signature; signed fields are prefixed with
this value followed by an underscore.
"""

CONTEXT_PREFIX = 'facebook.'
"""
Prefix used for keys published into the request environ.
"""

ORIGINAL_METHOD = CONTEXT_PREFIX + 'original_method'

REQUEST_METHOD_FIELD = 'request_method'
"""
Signed field that carries the HTTP method used by the client.
"""

INVALID_SIGNATURE_MESSAGE = 'Invalid Facebook signature'
