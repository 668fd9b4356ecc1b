"""
Middleware verifying requests signed by Facebook.

Facebook signs requests to canvas applications in one of two ways, either
as a set of ``fb_sig_*`` POST fields with the signature in ``fb_sig``, or as
a set of ``<api_key>_*`` cookies with the signature in the ``<api_key>``
cookie.

"""
import logging

# Typing imports
from typing import Any, Callable, Dict, Optional  # noqa

from . import signing
from .coercion import coerce_fields
from .constants import (
    Verification, SIGNATURE_PREFIX, CONTEXT_PREFIX, ORIGINAL_METHOD, REQUEST_METHOD_FIELD
)
from .data_structures import FacebookSettings, BaseHttpRequest  # noqa
from .exceptions import InvalidSignature
from .utils import always, dict_filter_update

__all__ = ('FacebookAuth',)

logger = logging.getLogger(__name__)


class FacebookAuth(object):
    """
    Middleware to verify a request signed by Facebook.

    Once verified the request method is converted from the Facebook POST to
    the method used by the client and the signed fields are published into
    the request environ as Python values (eg ``facebook.in_canvas``).

    If the signature is not valid an :class:`InvalidSignature` exception is
    raised resulting in a "400 Invalid Facebook signature" response.

    Requests that carry no signature at all are passed through untouched.

    :param application_secret: Secret shared with Facebook.
    :param api_key: Application API key; required to verify signed cookies.
    :param application_name: Name of the application.
    :param condition: Callable that receives the request and returns `True`
        if the request should be verified.
    :param prefix: Name of the signature field.
    :param publish_settings: Publish the name, API key and secret into the
        request environ.
    :param digest: Specify the digest function to use; default is md5 from hashlib

    """
    priority = 3  # Ensure authentication run early

    def __init__(self, application_secret, api_key=None, application_name=None, condition=None,
                 prefix=SIGNATURE_PREFIX, publish_settings=True, digest=None):
        # type: (str, str, str, Callable[[Any], bool], str, bool, Callable) -> None
        if not application_secret:
            raise ValueError("An application secret is required.")

        self.settings = FacebookSettings(application_secret, api_key, application_name)
        self.condition = condition or always
        self.prefix = prefix
        self.publish_settings = publish_settings
        self.digest = digest

    def verify(self, fields, signature):
        # type: (Dict[str, str], Optional[str]) -> Verification
        """
        Verify a set of fields against a signature.
        """
        if signing.verify_signature(fields, signature, self.settings.application_secret, self.digest):
            return Verification.Valid
        return Verification.Invalid

    def verify_params(self, request):
        # type: (BaseHttpRequest) -> Verification
        """
        Verify signed form fields.

        This does not modify the request.
        """
        form = request.form
        if self.prefix not in form:
            return Verification.NotApplicable

        _, fields = signing.partition_fields(form, self.prefix)
        return self.verify(fields, form[self.prefix])

    def verify_cookies(self, request):
        # type: (BaseHttpRequest) -> Verification
        """
        Verify signed cookies.
        """
        api_key = self.settings.api_key
        cookies = request.cookies
        if not api_key or api_key not in cookies:
            return Verification.NotApplicable

        _, fields = signing.partition_fields(cookies, api_key)
        return self.verify(fields, cookies[api_key])

    def authenticate(self, request):
        # type: (BaseHttpRequest) -> Verification
        """
        Determine the verification outcome of a request without modifying it.
        """
        if not self.condition(request):
            return Verification.NotApplicable

        outcome = self.verify_params(request)
        if outcome is Verification.NotApplicable:
            outcome = self.verify_cookies(request)
        return outcome

    def publish(self, request, fields):
        # type: (BaseHttpRequest, Dict[str, str]) -> None
        """
        Apply signed fields to a verified request.
        """
        environ = request.environ
        environ[ORIGINAL_METHOD] = request.method

        request_method = fields.pop(REQUEST_METHOD_FIELD, None)
        if request_method:
            request.method = request_method

        for name, value in coerce_fields(fields).items():
            environ[CONTEXT_PREFIX + name] = value

        if self.publish_settings:
            settings = self.settings
            dict_filter_update(environ, {
                CONTEXT_PREFIX + 'app_name': settings.application_name,
                CONTEXT_PREFIX + 'api_key': settings.api_key,
                CONTEXT_PREFIX + 'secret': settings.application_secret,
            })

    def pre_dispatch(self, request, _):
        # type: (BaseHttpRequest, Any) -> None
        """
        Pre dispatch hook
        """
        if not self.condition(request):
            return

        form = request.form
        if self.prefix in form:
            remaining, fields = signing.partition_fields(form, self.prefix)
            signature = remaining.pop(self.prefix)

            if self.verify(fields, signature) is not Verification.Valid:
                logger.debug("Rejected request with invalid %s signature.", self.prefix)
                raise InvalidSignature()

            request.form = remaining
            self.publish(request, fields)

        elif self.verify_cookies(request) is Verification.Invalid:
            logger.debug("Rejected request with invalid cookie signature.")
            raise InvalidSignature()
