import math

from pydantic import BaseModel

REQUIRED_ORDER_FIELDS = ("clientName", "items", "paymentId")


class PaymentIntentResponse(BaseModel):
    clientSecret: str


class OrderSavedResponse(BaseModel):
    message: str


def parse_amount(raw):
    """Return a positive, finite amount from a JSON value.

    Numbers and numeric strings are accepted; integral values come back as
    int. Raises ValueError for anything else.
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError(f"invalid amount: {raw!r}")
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = float(raw.strip() if isinstance(raw, str) else raw)
        except (TypeError, ValueError):
            raise ValueError(f"invalid amount: {raw!r}")
        if not math.isfinite(value):
            raise ValueError(f"invalid amount: {raw!r}")
        if value.is_integer():
            value = int(value)
    if value <= 0:
        raise ValueError(f"amount must be positive: {raw!r}")
    return value


def missing_order_fields(order) -> list:
    if not isinstance(order, dict):
        return list(REQUIRED_ORDER_FIELDS)
    return [field for field in REQUIRED_ORDER_FIELDS if not order.get(field)]
