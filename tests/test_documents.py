import pytest


def test_get_missing_returns_none(documents):
    assert documents.get("users/nobody") is None
    assert documents.get("users/nobody/email") is None
    assert documents.get("users") is None


def test_set_and_get_document(documents):
    documents.set("users/u1", {"uid": "u1", "email": "a@example.com"})

    assert documents.get("users/u1") == {"uid": "u1", "email": "a@example.com"}
    assert documents.get("users/u1/email") == "a@example.com"


def test_nested_set_keeps_sibling_fields(documents):
    documents.set("users/u1", {"uid": "u1", "email": "a@example.com"})

    documents.set("users/u1/resumeUrl", "http://x/resume.pdf")
    documents.set("users/u1/payments/pay_1", {"verified": True})

    doc = documents.get("users/u1")
    assert doc["email"] == "a@example.com"
    assert doc["resumeUrl"] == "http://x/resume.pdf"
    assert doc["payments"] == {"pay_1": {"verified": True}}


def test_nested_set_creates_document(documents):
    documents.set("users/u2/teamImageUrl", "http://x/team.png")

    assert documents.get("users/u2") == {"teamImageUrl": "http://x/team.png"}


def test_set_none_removes(documents):
    documents.set("users/u1", {"uid": "u1", "email": "a@example.com"})

    documents.set("users/u1/email", None)
    assert documents.get("users/u1") == {"uid": "u1"}

    documents.set("users/u1", None)
    assert documents.get("users/u1") is None


def test_returned_values_are_copies(documents):
    documents.set("users/u1", {"team": {"teamName": "A"}})

    doc = documents.get("users/u1")
    doc["team"]["teamName"] = "B"

    assert documents.get("users/u1/team/teamName") == "A"


def test_collection_read(documents):
    documents.set("users/u1", {"uid": "u1"})
    documents.set("users/u2", {"uid": "u2"})
    documents.set("users_archive/u3", {"uid": "u3"})

    assert documents.get("users") == {"u1": {"uid": "u1"}, "u2": {"uid": "u2"}}


def test_push_generates_unique_keys(documents):
    first = documents.push("campusAmbassadors", {"n": 1})
    second = documents.push("campusAmbassadors", {"n": 2})

    assert first != second
    assert documents.get(f"campusAmbassadors/{first}") == {"n": 1}
    assert len(documents.get("campusAmbassadors")) == 2


def test_rejects_collection_overwrite_and_empty_path(documents):
    with pytest.raises(ValueError):
        documents.set("users", {})
    with pytest.raises(ValueError):
        documents.get("/")


def test_server_timestamp_is_epoch_millis(documents):
    assert documents.server_timestamp() > 1_600_000_000_000


def test_add_creates_only_once(documents):
    assert documents.add("payments/u1:pay_1", {"verified": False}) is True
    assert documents.add("payments/u1:pay_1", {"verified": True}) is False

    assert documents.get("payments/u1:pay_1") == {"verified": False}


def test_add_requires_document_path(documents):
    with pytest.raises(ValueError):
        documents.add("payments", {"verified": True})
    with pytest.raises(ValueError):
        documents.add("payments/u1/nested", {"verified": True})
