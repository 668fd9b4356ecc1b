# -*- coding: utf-8 -*-
"""
Signing
~~~~~~~

Implementation of the Facebook parameter signing scheme.

A set of fields is signed by joining each pair as ``key=value``, sorting the
joined strings, concatenating them and appending the application secret. The
signature is the lowercase hex MD5 digest of the result.

The digest is fixed at MD5 for compatibility with the existing signing scheme;
an alternative digest can be supplied only where both signer and verifier
agree on it.

"""
import hashlib
import hmac

# Type imports
from typing import Callable, Dict, Mapping, Optional, Tuple  # noqa

from .constants import SIGNATURE_PREFIX
from .exceptions import SigningError

__all__ = ('canonical_string', 'generate_signature', 'verify_signature', 'sign_fields', 'partition_fields')

DEFAULT_DIGEST = hashlib.md5


def canonical_string(fields):
    # type: (Mapping[str, str]) -> str
    """
    Reduce a mapping of fields into a single string independent of ordering.

    Pairs are joined as ``key=value`` *before* sorting, the sort order of the
    joined strings is significant where a key or value contains ``=``.

    >>> canonical_string({'b': '2', 'a': '1'})
    'a=1b=2'

    """
    return ''.join(sorted('%s=%s' % i for i in fields.items()))


def generate_signature(fields, secret_key, digest=None):
    # type: (Mapping[str, str], str, Callable) -> str
    """
    Generate the signature for a set of (unprefixed) fields.

    :param fields: Signed fields with the prefix removed.
    :param secret_key: Application secret.
    :param digest: Specify the digest function to use; default is md5 from hashlib
    :return: Lowercase hex digest

    """
    digest = digest or DEFAULT_DIGEST
    msg = canonical_string(fields) + secret_key
    return digest(msg.encode('UTF8')).hexdigest()


def verify_signature(fields, signature, secret_key, digest=None):
    # type: (Mapping[str, str], Optional[str], str, Callable) -> bool
    """
    Verify a supplied signature matches a set of fields.

    Comparison is performed in constant time.

    :param fields: Signed fields with the prefix removed.
    :param signature: Signature supplied with the request.
    :param secret_key: Application secret.
    :param digest: Specify the digest function to use; default is md5 from hashlib
    :rtype: bool

    """
    if not signature:
        return False
    expected = generate_signature(fields, secret_key, digest)
    try:
        return hmac.compare_digest(expected, signature)
    except TypeError:
        # Non-ASCII text cannot be compared and can never match a hex digest.
        return False


def partition_fields(source, prefix=SIGNATURE_PREFIX):
    # type: (Mapping[str, str], str) -> Tuple[Dict[str, str], Dict[str, str]]
    """
    Partition a mapping into fields outside and inside of a namespace.

    Keys starting with ``prefix + "_"`` are returned in the second mapping
    with the prefix stripped, all other keys are returned unchanged in the
    first. The source mapping is not modified.

    >>> partition_fields({'fb_sig_user': '1', 'fb_sig': 'abc', 'foo': 'bar'})
    ({'fb_sig': 'abc', 'foo': 'bar'}, {'user': '1'})

    :param source: Form or cookie mapping.
    :param prefix: Namespace prefix.
    :return: Tuple of (remaining, extracted)

    """
    namespace = prefix + '_'
    offset = len(namespace)
    remaining = {}
    extracted = {}
    for key, value in source.items():
        if key.startswith(namespace):
            extracted[key[offset:]] = value
        else:
            remaining[key] = value
    return remaining, extracted


def sign_fields(fields, secret_key, prefix=SIGNATURE_PREFIX, digest=None):
    # type: (Mapping[str, str], str, str, Callable) -> Dict[str, str]
    """
    Sign a mapping of prefixed fields.

    Any field outside of the namespace is carried over but not signed.

    :param fields: Mapping of fields (eg ``{'fb_sig_user': '1'}``).
    :param secret_key: Application secret.
    :param prefix: Namespace prefix; the signature is stored under this key.
    :param digest: Specify the digest function to use; default is md5 from hashlib
    :return: Copy of fields with the signature added.
    :raises: SigningError

    """
    if prefix in fields:
        raise SigningError("Fields are already signed.")

    _, signed = partition_fields(fields, prefix)
    result = dict(fields)
    result[prefix] = generate_signature(signed, secret_key, digest)
    return result
