from enum import Enum
from typing import Optional


class _WireEnum(Enum):
    @classmethod
    def parse(cls, value: Optional[str]):
        if value is None:
            return None
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"Unknown {cls.__name__}: {value}")


class Operation(_WireEnum):
    PURCHASE = "PURCHASE"
    VERIFY = "VERIFY"


class PaymentMethod(_WireEnum):
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    NAPAS_BANK_TRANSFER = "NAPAS_BANK_TRANSFER"


class OrderStatus(_WireEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    VOIDED = "voided"
    CANCELLED = "cancelled"


class TransferType(_WireEnum):
    IN = "in"
    OUT = "out"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TransferType":
        if value is None:
            raise ValueError("TransferType cannot be null")
        return super().parse(value)
