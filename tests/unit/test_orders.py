import json
from datetime import date, datetime

import pytest

from sepay.config import ClientConfig, RetryPolicy
from sepay.enums import OrderStatus
from sepay.errors import NotFoundError, ParseError, ValidationError
from sepay.orders import Order, OrderList, OrderListRequest, OrderResource
from sepay.transport import HttpTransport

ORDER = {
    "id": "ord_1",
    "order_invoice_number": "INV-001",
    "status": "COMPLETED",
    "amount": 100000,
    "currency": "VND",
    "customer_id": "CUST-1",
    "payment_method": "CARD",
    "created_at": "2024-05-01 10:00:00",
    "updated_at": "2024-05-01T10:05:00",
    "transaction_id": "tx_9",
    "unknown_field": "ignored",
}


class Resp:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.text = json.dumps(body) if not isinstance(body, str) else body
        self.headers = {}


class Session:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)


def orders(*responses):
    session = Session(*responses)
    config = ClientConfig("M", "s", retry_policy=RetryPolicy(max_retries=0))
    return OrderResource(HttpTransport(config, session)), session


def test_retrieve():
    res, session = orders(Resp(200, ORDER))
    order = res.retrieve("ord_1")
    assert order.id == "ord_1"
    assert order.invoice_number == "INV-001"
    assert order.status == OrderStatus.COMPLETED
    assert order.created_at == datetime(2024, 5, 1, 10, 0, 0)
    assert order.updated_at == datetime(2024, 5, 1, 10, 5, 0)
    method, url, _ = session.calls[0]
    assert method == "GET"
    assert url.endswith("/v1/order/detail/ord_1")


def test_retrieve_quotes_order_id():
    res, session = orders(Resp(200, ORDER))
    res.retrieve("a/b c")
    assert session.calls[0][1].endswith("/v1/order/detail/a%2Fb%20c")


def test_blank_order_id_fails_before_io():
    res, session = orders()
    for call in (res.retrieve, res.cancel, res.void_transaction):
        with pytest.raises(ValidationError, match="Order ID is required"):
            call("")
    assert session.calls == []


def test_not_found():
    res, _ = orders(Resp(404, {"message": "Order not found"}))
    with pytest.raises(NotFoundError) as ei:
        res.retrieve("missing")
    assert ei.value.error_code == "NOT_FOUND"


def test_list_default_and_filtered_params():
    page = {"data": [ORDER], "total": 41, "page": 1, "per_page": 20, "total_pages": 3}
    res, session = orders(Resp(200, page), Resp(200, {"data": [], "page": 3, "total_pages": 3}))
    first = res.list()
    assert isinstance(first, OrderList)
    assert len(first.data) == 1 and first.total == 41
    assert first.has_next_page() and not first.has_prev_page()
    assert session.calls[0][2]["params"] == {"per_page": "20", "page": "1"}

    last = res.list(OrderListRequest(
        per_page=50, page=3, query="INV", customer_id="CUST-1", status=OrderStatus.PENDING,
        from_date=date(2024, 1, 1), to_date=date(2024, 1, 31), sort="created_at",
    ))
    assert not last.has_next_page() and last.has_prev_page()
    assert session.calls[1][2]["params"] == {
        "per_page": "50",
        "page": "3",
        "query": "INV",
        "customer_id": "CUST-1",
        "order_status": "pending",
        "from_created_at": "2024-01-01",
        "to_created_at": "2024-01-31",
        "sort": "created_at",
    }


def test_void_and_cancel_bodies():
    res, session = orders(Resp(200, dict(ORDER, status="voided")), Resp(200, ORDER), Resp(200, dict(ORDER, status="cancelled")))
    assert res.void_transaction("ord_1", "duplicate").status == OrderStatus.VOIDED
    res.void_transaction("ord_1")
    assert res.cancel("ord_1").status == OrderStatus.CANCELLED
    assert session.calls[0][1].endswith("/v1/order/voidTransaction")
    assert json.loads(session.calls[0][2]["data"]) == {"order_id": "ord_1", "reason": "duplicate"}
    assert json.loads(session.calls[1][2]["data"]) == {"order_id": "ord_1"}
    assert session.calls[2][1].endswith("/v1/order/cancel")
    assert json.loads(session.calls[2][2]["data"]) == {"order_id": "ord_1"}


def test_unexpected_shapes_are_parse_errors():
    res, _ = orders(Resp(200, [1, 2]), Resp(200, {"status": "done"}), Resp(200, dict(ORDER, status="weird")))
    with pytest.raises(ParseError):
        res.retrieve("ord_1")
    with pytest.raises(ParseError):
        res.retrieve("ord_1")
    with pytest.raises(ParseError):
        res.retrieve("ord_1")


def test_order_from_dict_minimal():
    order = Order.from_dict({"id": 5})
    assert order.id == "5"
    assert order.status is None
    assert order.amount == 0
