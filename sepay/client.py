from __future__ import annotations
from typing import Any, Optional
import logging

from .checkout import CheckoutBuilder
from .config import ClientConfig, Environment
from .forms import CheckoutResource
from .orders import OrderResource
from .transport import HttpTransport
from .webhook import WebhookHandler

logger = logging.getLogger(__name__)


class SePayClient:
    """Entry point bundling the checkout, order and webhook helpers.

    Example::

        client = SePayClient(ClientConfig("MERCHANT_ID", "SECRET_KEY"))
        request = client.new_checkout().purchase(100000, "INV-001", "Order payment")
        html = client.checkout().build_html_form(request)
        order = client.orders().retrieve("ord_123")
    """

    def __init__(self, config: ClientConfig, session: Optional[Any] = None) -> None:
        self._config = config
        self._transport = HttpTransport(config, session)
        self._checkout: Optional[CheckoutResource] = None
        self._orders: Optional[OrderResource] = None
        logger.debug("created client for merchant %s (%s)", config.merchant_id, config.environment.value)

    @classmethod
    def from_env(cls, session: Optional[Any] = None) -> "SePayClient":
        return cls(ClientConfig.from_env(), session)

    @property
    def merchant_id(self) -> str:
        return self._config.merchant_id

    @property
    def environment(self) -> Environment:
        return self._config.environment

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def checkout(self) -> CheckoutResource:
        if self._checkout is None:
            self._checkout = CheckoutResource(self._config.environment, self._config.secret_key)
        return self._checkout

    def orders(self) -> OrderResource:
        if self._orders is None:
            self._orders = OrderResource(self._transport)
        return self._orders

    def new_checkout(self) -> CheckoutBuilder:
        return CheckoutBuilder.create(self._config.merchant_id, self._config.secret_key).environment(
            self._config.environment
        )

    def webhooks(self, api_key: str) -> WebhookHandler:
        return WebhookHandler(api_key)

    def close(self) -> None:
        self._transport.close()
