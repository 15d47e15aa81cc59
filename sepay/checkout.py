from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Optional
from urllib.parse import urlsplit
import re

from .config import Environment
from .enums import Operation, PaymentMethod
from .errors import ValidationError
from .signing import Signer

CURRENCY = "VND"
MAX_INVOICE_LENGTH = 100
_INVOICE_RE = re.compile(r"[A-Za-z0-9_-]+")


def _s(v: Optional[str]) -> str:
    return "" if v is None else v


@dataclass(frozen=True)
class CheckoutRequest:
    merchant: str
    env: str
    operation: Operation
    order_amount: int
    order_description: str
    payment_method: Optional[PaymentMethod] = None
    currency: str = CURRENCY
    order_invoice_number: Optional[str] = None
    customer_id: Optional[str] = None
    agreement_id: Optional[str] = None
    agreement_name: Optional[str] = None
    agreement_type: Optional[str] = None
    agreement_payment_frequency: Optional[str] = None
    agreement_amount_per_payment: Optional[str] = None
    success_url: Optional[str] = None
    error_url: Optional[str] = None
    cancel_url: Optional[str] = None
    signature: Optional[str] = None

    def to_signature_map(self) -> Dict[str, str]:
        return {
            "merchant": _s(self.merchant),
            "env": _s(self.env),
            "operation": self.operation.value if self.operation else "",
            "payment_method": self.payment_method.value if self.payment_method else "",
            "order_amount": str(self.order_amount),
            "currency": _s(self.currency),
            "order_invoice_number": _s(self.order_invoice_number),
            "order_description": _s(self.order_description),
            "customer_id": _s(self.customer_id),
            "agreement_id": _s(self.agreement_id),
            "agreement_name": _s(self.agreement_name),
            "agreement_type": _s(self.agreement_type),
            "agreement_payment_frequency": _s(self.agreement_payment_frequency),
            "agreement_amount_per_payment": _s(self.agreement_amount_per_payment),
            "success_url": _s(self.success_url),
            "error_url": _s(self.error_url),
            "cancel_url": _s(self.cancel_url),
        }

    def to_form_fields(self) -> Dict[str, str]:
        fields = self.to_signature_map()
        fields["signature"] = _s(self.signature)
        return fields


def is_valid_url(url: str) -> bool:
    # Both checks are kept: the URL must parse AND carry an http(s) prefix.
    try:
        parts = urlsplit(url)
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not parts.netloc:
        return False
    return url.startswith("http://") or url.startswith("https://")


class CheckoutBuilder:
    """Collects checkout fields, validates them and signs the result.

    Setters return the builder so calls can be chained. ``build()`` either
    returns a signed, frozen ``CheckoutRequest`` or raises ``ValidationError``.
    """

    def __init__(self, merchant: Optional[str], secret_key: Optional[str]) -> None:
        if not merchant:
            raise ValidationError("Merchant ID is required")
        if not secret_key:
            raise ValidationError("Secret key is required")
        self._merchant = merchant
        self._signer = Signer(secret_key)
        self._environment = Environment.SANDBOX
        self._operation: Optional[Operation] = None
        self._payment_method: Optional[PaymentMethod] = None
        self._amount = 0
        self._invoice: Optional[str] = None
        self._description: Optional[str] = None
        self._customer_id: Optional[str] = None
        self._success_url: Optional[str] = None
        self._error_url: Optional[str] = None
        self._cancel_url: Optional[str] = None
        self._agreement_id: Optional[str] = None
        self._agreement_name: Optional[str] = None
        self._agreement_type: Optional[str] = None
        self._agreement_payment_frequency: Optional[str] = None
        self._agreement_amount_per_payment: Optional[str] = None

    @classmethod
    def create(cls, merchant: Optional[str], secret_key: Optional[str]) -> "CheckoutBuilder":
        return cls(merchant, secret_key)

    def environment(self, env: Optional[Environment]) -> "CheckoutBuilder":
        self._environment = env if env is not None else Environment.SANDBOX
        return self

    def operation(self, operation: Optional[Operation]) -> "CheckoutBuilder":
        self._operation = operation
        return self

    def payment_method(self, method: Optional[PaymentMethod]) -> "CheckoutBuilder":
        self._payment_method = method
        return self

    def amount(self, amount: int) -> "CheckoutBuilder":
        self._amount = amount
        return self

    def invoice_number(self, invoice: Optional[str]) -> "CheckoutBuilder":
        self._invoice = invoice
        return self

    def description(self, description: Optional[str]) -> "CheckoutBuilder":
        self._description = description
        return self

    def customer_id(self, customer_id: Optional[str]) -> "CheckoutBuilder":
        self._customer_id = customer_id
        return self

    def success_url(self, url: Optional[str]) -> "CheckoutBuilder":
        self._success_url = url
        return self

    def error_url(self, url: Optional[str]) -> "CheckoutBuilder":
        self._error_url = url
        return self

    def cancel_url(self, url: Optional[str]) -> "CheckoutBuilder":
        self._cancel_url = url
        return self

    def agreement_id(self, value: Optional[str]) -> "CheckoutBuilder":
        self._agreement_id = value
        return self

    def agreement_name(self, value: Optional[str]) -> "CheckoutBuilder":
        self._agreement_name = value
        return self

    def agreement_type(self, value: Optional[str]) -> "CheckoutBuilder":
        self._agreement_type = value
        return self

    def agreement_payment_frequency(self, value: Optional[str]) -> "CheckoutBuilder":
        self._agreement_payment_frequency = value
        return self

    def agreement_amount_per_payment(self, value: Optional[str]) -> "CheckoutBuilder":
        self._agreement_amount_per_payment = value
        return self

    def build(self) -> CheckoutRequest:
        self._validate()
        unsigned = CheckoutRequest(
            merchant=self._merchant,
            env=self._environment.value,
            operation=self._operation,
            payment_method=self._payment_method,
            order_amount=self._amount,
            currency=CURRENCY,
            order_invoice_number=self._invoice,
            order_description=self._description,
            customer_id=self._customer_id,
            agreement_id=self._agreement_id,
            agreement_name=self._agreement_name,
            agreement_type=self._agreement_type,
            agreement_payment_frequency=self._agreement_payment_frequency,
            agreement_amount_per_payment=self._agreement_amount_per_payment,
            success_url=self._success_url,
            error_url=self._error_url,
            cancel_url=self._cancel_url,
        )
        return replace(unsigned, signature=self._signer.sign(unsigned.to_signature_map()))

    def purchase(self, amount: int, invoice: str, description: str) -> CheckoutRequest:
        return self.operation(Operation.PURCHASE).amount(amount).invoice_number(invoice).description(description).build()

    def verify(self, description: str) -> CheckoutRequest:
        return self.operation(Operation.VERIFY).amount(0).description(description).build()

    def _validate(self) -> None:
        if self._operation is None:
            raise ValidationError("Operation is required")
        if not self._description:
            raise ValidationError("Order description is required")
        if not isinstance(self._amount, int) or isinstance(self._amount, bool):
            raise ValidationError("Order amount must be an integer")
        if self._operation == Operation.PURCHASE:
            self._validate_purchase()
        elif self._operation == Operation.VERIFY:
            if self._amount != 0:
                raise ValidationError("VERIFY requires amount = 0")
        for label, url in (("success", self._success_url), ("error", self._error_url), ("cancel", self._cancel_url)):
            if url is not None and not is_valid_url(url):
                raise ValidationError(f"Invalid {label} URL")

    def _validate_purchase(self) -> None:
        if self._amount <= 0:
            raise ValidationError("PURCHASE requires amount > 0")
        if not self._invoice:
            raise ValidationError("PURCHASE requires invoice number")
        if len(self._invoice) > MAX_INVOICE_LENGTH:
            raise ValidationError(f"Invoice number must be max {MAX_INVOICE_LENGTH} characters")
        if not _INVOICE_RE.fullmatch(self._invoice):
            raise ValidationError("Invoice number must be alphanumeric (hyphens and underscores allowed)")
