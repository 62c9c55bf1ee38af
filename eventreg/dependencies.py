"""
Collaborator factories wired into routes with ``Depends``.

Tests swap any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from eventreg.blobs import LocalBlobStore
from eventreg.config import get_settings
from eventreg.database import SessionLocal
from eventreg.documents import SqlDocumentStore
from eventreg.identity import SqlIdentityProvider
from eventreg.razorpay_service import build_gateway


def get_session_factory():
    return SessionLocal


def get_documents(session_factory=Depends(get_session_factory)):
    return SqlDocumentStore(session_factory)


def get_identity(session_factory=Depends(get_session_factory)):
    return SqlIdentityProvider(session_factory, verify_url=f"{get_settings().public_base_url}/verify-email")


def get_blobs():
    settings = get_settings()
    return LocalBlobStore(settings.upload_dir, settings.public_base_url)


@lru_cache(maxsize=1)
def get_gateway():
    settings = get_settings()
    return build_gateway(settings.razorpay_key_id, settings.razorpay_secret_key, settings.payment_currency)
