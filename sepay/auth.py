from typing import Optional
import re

from .errors import ConfigurationError
from .signing import constant_time_equals

APIKEY_PREFIX = "Apikey "
_PREFIX_RE = re.compile(re.escape(APIKEY_PREFIX), re.IGNORECASE)


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an ``Authorization: Apikey <token>`` header.

    The first ``Apikey `` (any case) wins. The token ends at the next comma.
    Returns None for other schemes or an empty token.
    """
    if not authorization:
        return None
    m = _PREFIX_RE.search(authorization)
    if m is None:
        return None
    token = authorization[m.end():].split(",", 1)[0].strip()
    return token or None


def is_valid_token(provided: Optional[str], expected: Optional[str]) -> bool:
    if not provided or not expected:
        return False
    return constant_time_equals(provided, expected)


class TokenAuthenticator:
    def __init__(self, expected_token: Optional[str]) -> None:
        if not expected_token:
            raise ConfigurationError("Webhook API key cannot be null or empty")
        self._expected = expected_token

    def __repr__(self) -> str:
        return "TokenAuthenticator(expected_token=***)"

    def authenticate(self, authorization: Optional[str]) -> bool:
        return is_valid_token(extract_token(authorization), self._expected)
