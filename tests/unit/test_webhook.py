import json
from datetime import datetime

import pytest

from sepay.enums import TransferType
from sepay.errors import ConfigurationError, WebhookError
from sepay.webhook import WebhookData, WebhookHandler, extract_identifier

PAYLOAD = {
    "id": 92704,
    "gateway": "Vietcombank",
    "transactionDate": "2023-03-25 14:02:37",
    "accountNumber": "0123499999",
    "code": None,
    "content": "chuyen tien mua iphone SE123456",
    "transferType": "IN",
    "transferAmount": 2277000,
    "accumulated": 19077000,
    "subAccount": None,
    "referenceCode": "MBVCB.3278907687",
    "description": "",
}


def test_handle_authenticates_then_parses():
    handler = WebhookHandler("hook-key")
    data = handler.handle("Apikey hook-key", json.dumps(PAYLOAD).encode("utf-8"))
    assert data.id == 92704
    assert data.transaction_date == datetime(2023, 3, 25, 14, 2, 37)
    assert data.transfer_type == TransferType.IN
    assert data.is_incoming()
    assert data.transfer_amount == 2277000
    assert data.accumulated == 19077000
    assert data.reference_code == "MBVCB.3278907687"
    assert data.sub_account is None


def test_rejects_bad_or_missing_key():
    handler = WebhookHandler("hook-key")
    for header in ("Apikey other", "Bearer hook-key", None, ""):
        with pytest.raises(WebhookError, match="Invalid API key"):
            handler.handle(header, PAYLOAD)


def test_handler_needs_key():
    with pytest.raises(ConfigurationError):
        WebhookHandler("")


def test_bad_json():
    with pytest.raises(WebhookError, match="not valid JSON"):
        WebhookHandler("k").parse("{not json")
    with pytest.raises(WebhookError, match="JSON object"):
        WebhookHandler("k").parse("[1]")


def test_invalid_utf8_is_rejected():
    with pytest.raises(WebhookError, match="not valid UTF-8"):
        WebhookHandler("k").parse(b"{\"content\": \"\xff\xfe\"}")


@pytest.mark.parametrize(
    "change, message",
    [
        ({"id": None}, "Transaction ID is required"),
        ({"id": -1}, "Transaction ID must be positive"),
        ({"gateway": " "}, "Gateway is required"),
        ({"transactionDate": None}, "Transaction date is required"),
        ({"transactionDate": "25/03/2023"}, "Invalid transaction date"),
        ({"accountNumber": ""}, "Account number is required"),
        ({"content": None}, "Content is required"),
        ({"transferType": "sideways"}, "Unknown TransferType"),
        ({"transferType": None}, "TransferType cannot be null"),
        ({"transferAmount": 0}, "Transfer amount must be positive"),
        ({"transferAmount": "lots"}, "Transfer amount must be a number"),
    ],
)
def test_payload_validation(change, message):
    with pytest.raises(WebhookError, match=message):
        WebhookData.from_dict(dict(PAYLOAD, **change))


def test_transfer_type_out_case_insensitive():
    data = WebhookData.from_dict(dict(PAYLOAD, transferType="Out"))
    assert data.transfer_type == TransferType.OUT
    assert not data.is_incoming()


def test_extract_identifier():
    assert extract_identifier("Thanh toan SE123456", "SE") == "123456"
    assert extract_identifier(PAYLOAD["content"], "SE") == "123456"
    assert extract_identifier("BASE123 then SE77", "SE") == "77"
    assert extract_identifier("SEASON sale", "SE") is None
    assert extract_identifier("ID123ABC", "ID") == "123ABC"
    assert extract_identifier("pay DH-12_a.", "DH") == "-12_a"
    assert extract_identifier("", "SE") is None
    assert extract_identifier("SE1", "") is None
