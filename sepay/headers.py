from typing import Dict
import base64

SDK_NAME = "sepay-python-sdk"
SDK_VERSION = "0.2.0"
USER_AGENT = f"{SDK_NAME}/{SDK_VERSION}"
JSON = "application/json"


def basic_auth_header(merchant_id: str, secret_key: str) -> str:
    creds = f"{merchant_id}:{secret_key}".encode("utf-8")
    return "Basic " + base64.b64encode(creds).decode("ascii")


def build_api_headers(merchant_id: str, secret_key: str) -> Dict[str, str]:
    return {
        "Authorization": basic_auth_header(merchant_id, secret_key),
        "Content-Type": JSON,
        "Accept": JSON,
        "User-Agent": USER_AGENT,
    }
