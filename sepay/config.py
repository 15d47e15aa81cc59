from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional
import os

from .errors import ConfigurationError


class Environment(Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> "Environment":
        for env in cls:
            if env.value == str(value or "").strip().lower():
                return env
        raise ConfigurationError(f"Unknown environment: {value}")


SANDBOX_API_BASE = "https://pgapi-sandbox.sepay.vn"
SANDBOX_CHECKOUT_BASE = "https://pay-sandbox.sepay.vn"
PROD_API_BASE = "https://pgapi.sepay.vn"
PROD_CHECKOUT_BASE = "https://pay.sepay.vn"
API_VERSION = "/v1"

CHECKOUT_INIT_PATH = API_VERSION + "/checkout/init"
ORDER_LIST_PATH = API_VERSION + "/order"
VOID_PATH = API_VERSION + "/order/voidTransaction"
CANCEL_PATH = API_VERSION + "/order/cancel"


def api_base_url(env: Environment) -> str:
    return PROD_API_BASE if env == Environment.PRODUCTION else SANDBOX_API_BASE


def checkout_base_url(env: Environment) -> str:
    return PROD_CHECKOUT_BASE if env == Environment.PRODUCTION else SANDBOX_CHECKOUT_BASE


def checkout_init_url(env: Environment) -> str:
    return checkout_base_url(env) + CHECKOUT_INIT_PATH


def order_detail_path(order_id: str) -> str:
    return API_VERSION + "/order/detail/" + order_id


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


@dataclass(frozen=True)
class RetryPolicy:
    """Timeouts and retry budget for one transport, in seconds."""

    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self) -> None:
        for name in ("connect_timeout", "read_timeout", "retry_delay"):
            if not _is_number(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a number")
        if not isinstance(self.max_retries, int) or isinstance(self.max_retries, bool):
            raise ConfigurationError("max_retries must be an integer")
        if self.connect_timeout <= 0:
            raise ConfigurationError("connect_timeout must be positive")
        if self.read_timeout <= 0:
            raise ConfigurationError("read_timeout must be positive")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay cannot be negative")


@dataclass(frozen=True)
class ClientConfig:
    merchant_id: str
    secret_key: str = field(repr=False)
    environment: Environment = Environment.SANDBOX
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    base_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.merchant_id or not self.merchant_id.strip():
            raise ConfigurationError("merchant_id cannot be null or empty")
        if not self.secret_key or not self.secret_key.strip():
            raise ConfigurationError("secret_key cannot be null or empty")
        if not isinstance(self.environment, Environment):
            raise ConfigurationError("environment cannot be null")

    @property
    def api_base_url(self) -> str:
        return (self.base_url or api_base_url(self.environment)).rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        env = os.environ if environ is None else environ
        defaults = RetryPolicy()
        policy = RetryPolicy(
            connect_timeout=_number(env, "SEPAY_CONNECT_TIMEOUT", float, defaults.connect_timeout),
            read_timeout=_number(env, "SEPAY_READ_TIMEOUT", float, defaults.read_timeout),
            max_retries=_number(env, "SEPAY_MAX_RETRIES", int, defaults.max_retries),
            retry_delay=_number(env, "SEPAY_RETRY_DELAY", float, defaults.retry_delay),
        )
        return cls(
            merchant_id=env.get("SEPAY_MERCHANT_ID", ""),
            secret_key=env.get("SEPAY_SECRET_KEY", ""),
            environment=Environment.parse(env.get("SEPAY_ENVIRONMENT", "sandbox")),
            retry_policy=policy,
            base_url=env.get("SEPAY_BASE_URL") or None,
        )


def _number(env: Mapping[str, str], name: str, kind, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number") from e
