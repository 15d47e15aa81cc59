from typing import Mapping, Optional, Tuple


# Wire order shared with the gateway and its other SDKs. Never reorder.
SIGNED_FIELDS: Tuple[str, ...] = (
    "merchant",
    "env",
    "operation",
    "payment_method",
    "order_amount",
    "currency",
    "order_invoice_number",
    "order_description",
    "customer_id",
    "agreement_id",
    "agreement_name",
    "agreement_type",
    "agreement_payment_frequency",
    "agreement_amount_per_payment",
    "success_url",
    "error_url",
    "cancel_url",
)


def _value(fields: Mapping[str, Optional[str]], name: str) -> str:
    v = fields.get(name)
    return "" if v is None else str(v)


def build_message(fields: Optional[Mapping[str, Optional[str]]] = None) -> str:
    """Return the HMAC input for ``fields``.

    Every name of ``SIGNED_FIELDS`` contributes one ``name=value`` segment, in
    the declared order, whether or not the mapping holds it. Names outside the
    field set are ignored.
    """
    fields = fields or {}
    return ",".join(f"{name}={_value(fields, name)}" for name in SIGNED_FIELDS)
