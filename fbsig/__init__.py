"""
fbsig
~~~~~

Verification of signed Facebook canvas requests.

"""
from .constants import (
    HTTPStatus,
    Verification,
)  # noqa
from .data_structures import (
    HttpResponse,
    BaseHttpRequest,
    FacebookSettings,
)  # noqa
from .exceptions import (
    ImmediateHttpResponse,
    InvalidSignature,
    SigningError,
)  # noqa
from .handlers import (
    Handler,
)  # noqa
from .middleware import (
    FacebookAuth,
)  # noqa
from .signing import (
    canonical_string,
    generate_signature,
    verify_signature,
    sign_fields,
    partition_fields,
)  # noqa
