import logging

from .headers import SDK_VERSION as __version__
from .canonical import SIGNED_FIELDS, build_message
from .signing import Signer, constant_time_equals
from .auth import TokenAuthenticator, extract_token, is_valid_token
from .config import ClientConfig, Environment, RetryPolicy
from .enums import Operation, OrderStatus, PaymentMethod, TransferType
from .checkout import CheckoutBuilder, CheckoutRequest
from .forms import CheckoutForm, CheckoutResource, escape_html
from .transport import HttpTransport
from .orders import Order, OrderList, OrderListRequest, OrderResource
from .webhook import WebhookData, WebhookHandler, extract_identifier
from .client import SePayClient
from .errors import (
    SePayError,
    ConfigurationError,
    ValidationError,
    WebhookError,
    TransportError,
    RequestInterrupted,
    ParseError,
    ApiError,
    ClientError,
    AuthError,
    NotFoundError,
    RateLimitError,
    ServerError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "SIGNED_FIELDS",
    "build_message",
    "Signer",
    "constant_time_equals",
    "TokenAuthenticator",
    "extract_token",
    "is_valid_token",
    "ClientConfig",
    "Environment",
    "RetryPolicy",
    "Operation",
    "OrderStatus",
    "PaymentMethod",
    "TransferType",
    "CheckoutBuilder",
    "CheckoutRequest",
    "CheckoutForm",
    "CheckoutResource",
    "escape_html",
    "HttpTransport",
    "Order",
    "OrderList",
    "OrderListRequest",
    "OrderResource",
    "WebhookData",
    "WebhookHandler",
    "extract_identifier",
    "SePayClient",
    "SePayError",
    "ConfigurationError",
    "ValidationError",
    "WebhookError",
    "TransportError",
    "RequestInterrupted",
    "ParseError",
    "ApiError",
    "ClientError",
    "AuthError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
]
