from typing import Optional


class SePayError(Exception):
    pass


class ConfigurationError(SePayError, ValueError):
    pass


class ValidationError(SePayError, ValueError):
    pass


class WebhookError(SePayError):
    pass


class TransportError(SePayError):
    pass


class RequestInterrupted(SePayError):
    pass


class ParseError(SePayError):
    pass


class ApiError(SePayError):
    """Non-2xx answer from the gateway API."""

    def __init__(self, message: str, status_code: int, error_code: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_code:
            return f"API error ({self.status_code}, {self.error_code}): {self.message}"
        return f"API error ({self.status_code}): {self.message}"


class ClientError(ApiError):
    pass


class AuthError(ApiError):
    pass


class NotFoundError(ApiError):
    def __init__(self, message: str):
        super().__init__(message, 404, "NOT_FOUND")


class RateLimitError(ApiError):
    def __init__(self, message: str, retry_after: Optional[int] = None, error_code: Optional[str] = None):
        self.retry_after = retry_after
        super().__init__(message, 429, error_code)

    def __str__(self) -> str:
        s = super().__str__()
        if self.retry_after is not None:
            s += f", retry after {self.retry_after} seconds"
        return s


class ServerError(ApiError):
    pass
