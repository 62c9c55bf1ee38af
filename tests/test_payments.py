import os
import threading

from eventreg.documents import SqlDocumentStore
from eventreg.payments import record_path, verify_payment
from eventreg.razorpay_service import compute_signature

from conftest import TestingSessionLocal


class BarrierStore(SqlDocumentStore):
    """Holds every ``add`` until all callers have passed the existence check."""

    def __init__(self, session_factory, parties):
        super().__init__(session_factory)
        self.barrier = threading.Barrier(parties)

    def add(self, path, value):
        self.barrier.wait(timeout=5)
        return super().add(path, value)


def test_concurrent_verifications_agree_on_one_record(gateway):
    store = BarrierStore(TestingSessionLocal, parties=2)
    good = compute_signature(os.environ["RZP_SECRET_KEY"], "order_r", "pay_r")
    results = {}

    def verify(name, signature):
        results[name] = verify_payment(gateway, store, "u1", "order_r", "pay_r", signature)

    threads = [
        threading.Thread(target=verify, args=("forged", "forged")),
        threading.Thread(target=verify, args=("genuine", good)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    stored = SqlDocumentStore(TestingSessionLocal).get(record_path("u1", "pay_r"))
    assert set(results) == {"forged", "genuine"}
    assert results["forged"].verified == stored["verified"]
    assert results["genuine"].verified == stored["verified"]
    assert results["forged"].signature == results["genuine"].signature == stored["signature"]


def test_existing_record_is_returned_without_writing(gateway, documents, mocker):
    documents.add(record_path("u1", "pay_x"), {
        "orderId": "order_x", "paymentId": "pay_x", "signature": "s", "verified": False,
    })
    add = mocker.spy(documents, "add")

    good = compute_signature(os.environ["RZP_SECRET_KEY"], "order_x", "pay_x")
    record = verify_payment(gateway, documents, "u1", "order_x", "pay_x", good)

    assert record.verified is False
    add.assert_not_called()
