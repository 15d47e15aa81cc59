from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .config import CANCEL_PATH, ORDER_LIST_PATH, VOID_PATH, order_detail_path
from .enums import OrderStatus
from .errors import ParseError, ValidationError
from .transport import HttpTransport

DEFAULT_PER_PAGE = 20
DEFAULT_PAGE = 1


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Order:
    id: str
    invoice_number: Optional[str] = None
    status: Optional[OrderStatus] = None
    amount: int = 0
    currency: Optional[str] = None
    customer_id: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reference_code: Optional[str] = None
    transaction_id: Optional[str] = None
    transaction_status: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Order":
        return cls(
            id=str(d["id"]),
            invoice_number=d.get("order_invoice_number"),
            status=OrderStatus.parse(d.get("status")),
            amount=int(d.get("amount") or 0),
            currency=d.get("currency"),
            customer_id=d.get("customer_id"),
            description=d.get("description"),
            payment_method=d.get("payment_method"),
            created_at=parse_timestamp(d.get("created_at")),
            updated_at=parse_timestamp(d.get("updated_at")),
            reference_code=d.get("reference_code"),
            transaction_id=d.get("transaction_id"),
            transaction_status=d.get("transaction_status"),
        )


@dataclass(frozen=True)
class OrderList:
    data: List[Order] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    total_pages: int = 0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OrderList":
        return cls(
            data=[Order.from_dict(o) for o in d.get("data") or []],
            total=int(d.get("total") or 0),
            page=int(d.get("page") or DEFAULT_PAGE),
            per_page=int(d.get("per_page") or DEFAULT_PER_PAGE),
            total_pages=int(d.get("total_pages") or 0),
        )

    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    def has_prev_page(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class OrderListRequest:
    per_page: Optional[int] = None
    page: Optional[int] = None
    query: Optional[str] = None
    customer_id: Optional[str] = None
    status: Optional[OrderStatus] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    sort: Optional[str] = None

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "per_page": str(self.per_page if self.per_page is not None else DEFAULT_PER_PAGE),
            "page": str(self.page if self.page is not None else DEFAULT_PAGE),
        }
        if self.query:
            params["query"] = self.query
        if self.customer_id:
            params["customer_id"] = self.customer_id
        if self.status is not None:
            params["order_status"] = self.status.value
        if self.from_date is not None:
            params["from_created_at"] = self.from_date.isoformat()
        if self.to_date is not None:
            params["to_created_at"] = self.to_date.isoformat()
        if self.sort:
            params["sort"] = self.sort
        return params


def _decode(kind, data: Any):
    if not isinstance(data, dict):
        raise ParseError(f"Unexpected {kind.__name__} response")
    try:
        return kind.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Failed to parse {kind.__name__}: {e}") from e


class OrderResource:
    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    def retrieve(self, order_id: str) -> Order:
        _require_order_id(order_id)
        return _decode(Order, self._transport.get(order_detail_path(quote(order_id, safe=""))))

    def list(self, request: Optional[OrderListRequest] = None) -> OrderList:
        request = request or OrderListRequest()
        return _decode(OrderList, self._transport.get(ORDER_LIST_PATH, params=request.to_query_params()))

    def void_transaction(self, order_id: str, reason: Optional[str] = None) -> Order:
        _require_order_id(order_id)
        body = {"order_id": order_id}
        if reason is not None:
            body["reason"] = reason
        return _decode(Order, self._transport.post(VOID_PATH, body))

    def cancel(self, order_id: str) -> Order:
        _require_order_id(order_id)
        return _decode(Order, self._transport.post(CANCEL_PATH, {"order_id": order_id}))


def _require_order_id(order_id: Optional[str]) -> None:
    if not order_id:
        raise ValidationError("Order ID is required")
