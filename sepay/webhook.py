from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union
import json
import logging
import re

from .auth import TokenAuthenticator
from .enums import TransferType
from .errors import WebhookError

logger = logging.getLogger(__name__)

TRANSACTION_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _required_str(d: Dict[str, Any], key: str, label: str) -> str:
    v = d.get(key)
    if not isinstance(v, str) or not v.strip():
        raise WebhookError(f"{label} is required")
    return v


def _optional_str(d: Dict[str, Any], key: str) -> Optional[str]:
    v = d.get(key)
    return None if v is None else str(v)


def _int(d: Dict[str, Any], key: str, label: str, positive: bool = False) -> Optional[int]:
    v = d.get(key)
    if v is None:
        if positive:
            raise WebhookError(f"{label} is required")
        return None
    if isinstance(v, bool):
        raise WebhookError(f"{label} must be a number")
    try:
        n = int(v)
    except (TypeError, ValueError):
        raise WebhookError(f"{label} must be a number") from None
    if positive and n <= 0:
        raise WebhookError(f"{label} must be positive")
    return n


@dataclass(frozen=True)
class WebhookData:
    """One bank transaction pushed by the gateway."""

    id: int
    gateway: str
    transaction_date: datetime
    account_number: str
    content: str
    transfer_type: TransferType
    transfer_amount: int
    sub_account: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    reference_code: Optional[str] = None
    accumulated: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebhookData":
        if not isinstance(d, dict):
            raise WebhookError("Webhook payload must be a JSON object")
        raw_date = d.get("transactionDate")
        if not raw_date:
            raise WebhookError("Transaction date is required")
        try:
            transaction_date = datetime.strptime(str(raw_date), TRANSACTION_DATE_FORMAT)
        except ValueError:
            raise WebhookError(f"Invalid transaction date: {raw_date}") from None
        try:
            transfer_type = TransferType.parse(d.get("transferType"))
        except ValueError as e:
            raise WebhookError(str(e)) from None
        return cls(
            id=_int(d, "id", "Transaction ID", positive=True),
            gateway=_required_str(d, "gateway", "Gateway"),
            transaction_date=transaction_date,
            account_number=_required_str(d, "accountNumber", "Account number"),
            content=_required_str(d, "content", "Content"),
            transfer_type=transfer_type,
            transfer_amount=_int(d, "transferAmount", "Transfer amount", positive=True),
            sub_account=_optional_str(d, "subAccount"),
            code=_optional_str(d, "code"),
            description=_optional_str(d, "description"),
            reference_code=_optional_str(d, "referenceCode"),
            accumulated=_int(d, "accumulated", "Accumulated"),
        )

    def is_incoming(self) -> bool:
        return self.transfer_type == TransferType.IN


class WebhookHandler:
    """Authenticates and decodes webhook calls sent with ``Authorization: Apikey <token>``."""

    def __init__(self, api_key: str) -> None:
        self._auth = TokenAuthenticator(api_key)

    def authenticate(self, authorization: Optional[str]) -> None:
        if not self._auth.authenticate(authorization):
            logger.warning("rejected webhook call with missing or invalid API key")
            raise WebhookError("Invalid API key")

    def parse(self, body: Union[bytes, str, Dict[str, Any]]) -> WebhookData:
        if isinstance(body, (bytes, bytearray)):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                raise WebhookError("Webhook payload is not valid UTF-8") from None
        if isinstance(body, str):
            try:
                body = json.loads(body)
            except ValueError:
                raise WebhookError("Webhook payload is not valid JSON") from None
        return WebhookData.from_dict(body)

    def handle(self, authorization: Optional[str], body: Union[bytes, str, Dict[str, Any]]) -> WebhookData:
        self.authenticate(authorization)
        data = self.parse(body)
        logger.debug("accepted webhook transaction %s", data.id)
        return data


def extract_identifier(content: Optional[str], prefix: Optional[str]) -> Optional[str]:
    """Find ``prefix`` followed by an identifier in free-text transfer content.

    ``extract_identifier("Thanh toan SE123456", "SE") == "123456"``. Matches
    where the prefix is glued to surrounding letters ("BASE1", "SEASON") are
    skipped.
    """
    if not content or not prefix:
        return None
    for m in re.finditer(re.escape(prefix) + r"([A-Za-z0-9_-]+)", content):
        start = m.start()
        end = start + len(prefix)
        if start > 0 and content[start - 1].isalpha():
            continue
        if prefix[-1].isalpha() and end < len(content) and content[end].isalpha():
            continue
        return m.group(1)
    return None
