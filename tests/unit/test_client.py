import json

from sepay import ClientConfig, Environment, SePayClient, Signer
from sepay.checkout import CheckoutBuilder
from sepay.forms import CheckoutResource
from sepay.orders import OrderResource
from sepay.webhook import WebhookHandler


class Session:
    def __init__(self, body):
        self.body = body
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return type("R", (), {"status_code": 200, "text": json.dumps(self.body), "headers": {}})()

    def close(self):
        self.closed = True


def test_client_wires_resources():
    session = Session({"id": "ord_1", "status": "pending"})
    client = SePayClient(ClientConfig("MERCHANT_1", "secret", environment=Environment.PRODUCTION), session)
    assert client.merchant_id == "MERCHANT_1"
    assert client.environment is Environment.PRODUCTION
    assert isinstance(client.checkout(), CheckoutResource)
    assert client.checkout() is client.checkout()
    assert isinstance(client.orders(), OrderResource)
    assert client.orders() is client.orders()
    assert isinstance(client.webhooks("hook"), WebhookHandler)

    order = client.orders().retrieve("ord_1")
    assert order.id == "ord_1"
    assert session.calls[0][1] == "https://pgapi.sepay.vn/v1/order/detail/ord_1"

    client.close()
    assert session.closed


def test_new_checkout_round_trip():
    client = SePayClient(ClientConfig("MERCHANT_1", "secret"), Session({}))
    builder = client.new_checkout()
    assert isinstance(builder, CheckoutBuilder)
    req = builder.purchase(100000, "INV-001", "Order payment")
    assert req.merchant == "MERCHANT_1"
    assert req.env == "sandbox"
    form = client.checkout().generate_form(req)
    fields = dict(form.fields)
    signature = fields.pop("signature")
    assert client.checkout().verify_signature(fields, signature)
    assert Signer("secret").sign(fields) == signature


def test_from_env(monkeypatch):
    monkeypatch.setenv("SEPAY_MERCHANT_ID", "ENV_M")
    monkeypatch.setenv("SEPAY_SECRET_KEY", "env-secret")
    monkeypatch.setenv("SEPAY_ENVIRONMENT", "sandbox")
    client = SePayClient.from_env(session=Session({}))
    assert client.merchant_id == "ENV_M"
    assert client.transport.base_url == "https://pgapi-sandbox.sepay.vn"
