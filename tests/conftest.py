import os
import tempfile

# Must be set before eventreg modules are imported.
UPLOAD_ROOT = tempfile.mkdtemp(prefix="eventreg-uploads-")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("RZP_KEY_ID", "rzp_test_key")
os.environ.setdefault("RZP_SECRET_KEY", "rzp_test_secret")
os.environ.setdefault("ADMIN_TOKEN", "admin-test-token")
os.environ["DATABASE_URL"] = "sqlite:///./test_temp.db"
os.environ["UPLOAD_DIR"] = UPLOAD_ROOT
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from eventreg.auth import create_access_token
from eventreg.blobs import LocalBlobStore
from eventreg.database import Base
from eventreg.dependencies import get_blobs, get_gateway, get_session_factory
from eventreg.documents import SqlDocumentStore
from eventreg.main import app as fastapi_app
from eventreg.razorpay_service import PaymentGateway

RZP_SECRET = os.environ["RZP_SECRET_KEY"]

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_temp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)

TEAM_PAYLOAD = {
    "formDetails": {
        "teamName": "Rocketeers",
        "country": "India",
        "institutionName": "IIT Madras",
        "teamLeader": {
            "fullName": "Asha Rao",
            "email": "lead@example.com",
            "phoneNumber": "+91-9000000000",
            "dateOfBirth": "2001-04-12",
        },
    },
    "teamMembers": [
        {
            "fullName": "Ravi Kumar",
            "email": "ravi@example.com",
            "phoneNumber": "+91-9000000001",
            "dateOfBirth": "2002-01-30",
            "emergencyContact": "+91-9000000009",
        }
    ],
}


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def documents():
    return SqlDocumentStore(TestingSessionLocal)


@pytest.fixture
def razorpay_client(mocker):
    client = mocker.Mock()
    client.order.create.side_effect = lambda data: {
        "id": "order_test_123",
        "entity": "order",
        "amount": data["amount"],
        "currency": data["currency"],
        "receipt": data["receipt"],
        "status": "created",
    }
    return client


@pytest.fixture
def gateway(razorpay_client):
    return PaymentGateway(razorpay_client, RZP_SECRET, "INR")


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStore(str(tmp_path / "blobs"), "http://testserver")


@pytest.fixture
def client(gateway, blobs):
    fastapi_app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    fastapi_app.dependency_overrides[get_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[get_blobs] = lambda: blobs
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def user(documents):
    uid = "user-123"
    documents.set(f"users/{uid}", {"uid": uid, "email": "lead@example.com"})
    return uid


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {os.environ['ADMIN_TOKEN']}"}
