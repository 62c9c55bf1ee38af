import logging
from dataclasses import asdict, dataclass
from typing import Any

from eventreg.documents import DocumentStore
from eventreg.razorpay_service import Order, PaymentGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentVerificationRecord:
    orderId: str
    paymentId: str
    signature: str
    verified: bool


def create_order(gateway: PaymentGateway, amount: Any) -> Order:
    return gateway.create_order(amount)


def record_path(uid: str, payment_id: str) -> str:
    # One row per (uid, payment id); uids never contain ":".
    return f"payments/{uid}:{payment_id}"


def _from_stored(stored: dict, order_id: str, payment_id: str) -> PaymentVerificationRecord:
    return PaymentVerificationRecord(
        orderId=stored.get("orderId", order_id),
        paymentId=stored.get("paymentId", payment_id),
        signature=stored.get("signature", ""),
        verified=stored.get("verified") is True,
    )


def verify_payment(
    gateway: PaymentGateway,
    documents: DocumentStore,
    uid: str,
    order_id: str,
    payment_id: str,
    signature: str,
) -> PaymentVerificationRecord:
    """Check the checkout signature and persist the outcome once per (uid, payment id).

    If a record already exists it is returned as stored; records are never rewritten.
    """
    path = record_path(uid, payment_id)
    existing = documents.get(path)
    if existing:
        logger.info("Verification for payment %s already recorded (verified=%s)",
                    payment_id, existing.get("verified"))
        return _from_stored(existing, order_id, payment_id)

    record = PaymentVerificationRecord(
        orderId=order_id,
        paymentId=payment_id,
        signature=signature,
        verified=gateway.verify_signature(order_id, payment_id, signature),
    )
    created = documents.add(path, {**asdict(record), "uid": uid, "createdAt": documents.server_timestamp()})
    if not created:
        # A concurrent call for the same payment stored its record first.
        stored = documents.get(path) or {}
        logger.info("Verification for payment %s was recorded concurrently (verified=%s)",
                    payment_id, stored.get("verified"))
        return _from_stored(stored, order_id, payment_id)

    if record.verified:
        logger.info("Payment %s for order %s verified for user %s", payment_id, order_id, uid)
    else:
        logger.warning("Signature mismatch for payment %s (order %s, user %s)", payment_id, order_id, uid)
    return record
