from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .checkout import CheckoutRequest
from .config import CHECKOUT_INIT_PATH, Environment, checkout_init_url
from .errors import ConfigurationError
from .signing import Signer

DEFAULT_FORM_ID = "sepay-checkout-form"


def escape_html(text: Optional[str]) -> str:
    if text is None:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


@dataclass(frozen=True)
class CheckoutForm:
    action_url: str
    fields: Dict[str, str] = field(default_factory=dict)

    @property
    def signature(self) -> Optional[str]:
        return self.fields.get("signature")


class CheckoutResource:
    """Renders signed checkout requests as hosted-checkout forms."""

    def __init__(
        self,
        environment: Optional[Environment] = None,
        secret_key: Optional[str] = None,
        checkout_base_url: Optional[str] = None,
    ) -> None:
        self._environment = environment or Environment.SANDBOX
        self._signer = Signer(secret_key) if secret_key else None
        self._custom_base = checkout_base_url

    def checkout_url(self) -> str:
        if self._custom_base is not None:
            return self._custom_base.rstrip("/") + CHECKOUT_INIT_PATH
        return checkout_init_url(self._environment)

    def generate_form(self, request: CheckoutRequest) -> CheckoutForm:
        return CheckoutForm(self.checkout_url(), request.to_form_fields())

    def build_html_form(self, request: CheckoutRequest, submit_label: str = "Pay Now") -> str:
        form = self.generate_form(request)
        lines = [f'<form method="POST" action="{escape_html(form.action_url)}">']
        lines += _hidden_inputs(form.fields)
        lines.append(f'    <button type="submit">{escape_html(submit_label)}</button>')
        lines.append("</form>")
        return "\n".join(lines)

    def auto_submit_script(self, form_id: Optional[str] = None) -> str:
        safe_id = form_id or DEFAULT_FORM_ID
        return f'<script>document.getElementById("{escape_html(safe_id)}").submit();</script>'

    def build_auto_submit_form(self, request: CheckoutRequest, form_id: Optional[str] = None) -> str:
        safe_id = form_id or DEFAULT_FORM_ID
        form = self.generate_form(request)
        lines = [f'<form id="{escape_html(safe_id)}" method="POST" action="{escape_html(form.action_url)}">']
        lines += _hidden_inputs(form.fields)
        lines.append("</form>")
        return "\n".join(lines) + "\n" + self.auto_submit_script(safe_id)

    def verify_signature(self, fields: Mapping[str, Optional[str]], signature: Optional[str]) -> bool:
        """Check the signature of a callback or redirect coming back from checkout."""
        if self._signer is None:
            raise ConfigurationError("Cannot verify signature: no secret key provided to CheckoutResource")
        return self._signer.verify(fields, signature)


def _hidden_inputs(fields: Mapping[str, str]):
    return [
        f'    <input type="hidden" name="{escape_html(k)}" value="{escape_html(v)}">'
        for k, v in fields.items()
    ]
