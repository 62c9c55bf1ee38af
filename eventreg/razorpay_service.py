"""
Razorpay order creation and payment signature checks.

Flow:
  1. Client posts the amount to /api/payment; the server creates a
     Razorpay order and returns it.
  2. Client runs checkout and receives {order_id, payment_id, signature}.
  3. Client posts those to /api/verify; the server recomputes
     HMAC-SHA256(secret, "{order_id}|{payment_id}") and compares.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

import razorpay
import requests
from razorpay.errors import BadRequestError, ServerError
from razorpay.errors import GatewayError as RazorpayGatewayError

from eventreg.errors import GatewayError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Order:
    id: str
    amount: int          # minor units (paise)
    currency: str
    receipt: str
    raw: dict


def to_minor_units(amount: Any) -> int:
    """Convert a positive major-unit amount (number or numeric string) to minor units."""
    if amount is None or isinstance(amount, bool) or amount == "":
        raise ValidationError("amount: is required.")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValidationError("amount: must be a number.")
    if not value.is_finite():
        raise ValidationError("amount: must be a positive number.")
    try:
        minor = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Result needs more digits than the decimal context allows.
        raise ValidationError("amount: is too large.")
    if minor <= 0:
        raise ValidationError("amount: must be a positive number.")
    return minor


def new_receipt() -> str:
    return secrets.token_hex(10)


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    message = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_payment_signature(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    expected = compute_signature(secret, order_id, payment_id)
    # compare_digest on str rejects non-ASCII input with TypeError; compare bytes instead.
    return hmac.compare_digest(expected.encode("utf-8"), (signature or "").encode("utf-8"))


class PaymentGateway:
    def __init__(self, client, secret: str, currency: str = "INR"):
        self.client = client
        self.secret = secret
        self.currency = currency

    def create_order(self, amount: Any) -> Order:
        options = {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "receipt": new_receipt(),
        }
        try:
            order = self.client.order.create(data=options)
        except (
            BadRequestError,
            RazorpayGatewayError,
            ServerError,
            requests.RequestException,
        ) as exc:
            logger.error("Razorpay order creation failed: %s", exc)
            raise GatewayError("Failed to create order") from exc

        logger.info("Order created %s for %s %s", order.get("id"), order.get("amount"), order.get("currency"))
        return Order(
            id=order["id"],
            amount=order.get("amount", options["amount"]),
            currency=order.get("currency", options["currency"]),
            receipt=order.get("receipt", options["receipt"]),
            raw=order,
        )

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(self.secret, order_id, payment_id, signature)


def build_gateway(key_id: str, secret: str, currency: str) -> PaymentGateway:
    client = razorpay.Client(auth=(key_id, secret))
    return PaymentGateway(client, secret, currency)
