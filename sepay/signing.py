from __future__ import annotations
from typing import Mapping, Optional, Union
import base64
import hashlib
import hmac

from nacl import bindings

from .canonical import build_message
from .errors import ConfigurationError


def _to_bytes(v: Union[str, bytes]) -> bytes:
    return v.encode("utf-8") if isinstance(v, str) else bytes(v)


def constant_time_equals(a: Union[str, bytes], b: Union[str, bytes]) -> bool:
    # sodium_memcmp pads both buffers to the longer length and never exits early
    return bindings.sodium_memcmp(_to_bytes(a), _to_bytes(b))


class Signer:
    """HMAC-SHA256 signer for checkout fields.

    The key is fixed at construction. A signer keeps no per-call state and can
    be shared between threads.
    """

    def __init__(self, secret_key: Optional[str]) -> None:
        if not secret_key:
            raise ConfigurationError("Secret key cannot be null or empty")
        self._key = secret_key.encode("utf-8")

    def __repr__(self) -> str:
        return "Signer(secret_key=***)"

    def sign(self, fields: Optional[Mapping[str, Optional[str]]] = None) -> str:
        return self._hmac(build_message(fields))

    def verify(self, fields: Optional[Mapping[str, Optional[str]]], candidate: Optional[str]) -> bool:
        if not candidate:
            return False
        return constant_time_equals(self.sign(fields), candidate)

    def _hmac(self, message: str, digestmod=hashlib.sha256) -> str:
        try:
            mac = hmac.new(self._key, message.encode("utf-8"), digestmod)
        except (TypeError, ValueError) as e:
            raise ConfigurationError("Failed to compute HMAC signature") from e
        return base64.b64encode(mac.digest()).decode("ascii")
