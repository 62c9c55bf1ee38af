"""
Account storage and sign-in.

``SqlIdentityProvider`` keeps accounts in the ``accounts`` table and
hashes passwords with PBKDF2-HMAC-SHA256. Failures are reported as
``IdentityError`` carrying a provider code (``auth/...``); callers map
those codes onto the application's error taxonomy.
"""

import hashlib
import hmac
import logging
import os
import secrets
import uuid
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eventreg.models import Account

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "auth/email-already-in-use"
INVALID_CREDENTIAL = "auth/invalid-credential"
USER_NOT_FOUND = "auth/user-not-found"
INVALID_ACTION_CODE = "auth/invalid-action-code"
INTERNAL = "auth/internal-error"

PBKDF2_ITERATIONS = 100_000


class IdentityError(Exception):
    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


@dataclass(frozen=True)
class AccountInfo:
    uid: str
    email: str
    email_verified: bool


class IdentityProvider(Protocol):
    def create_account(self, email: str, password: str) -> AccountInfo: ...

    def sign_in(self, email: str, password: str) -> AccountInfo: ...

    def send_verification_email(self, uid: str) -> None: ...

    def is_email_verified(self, uid: str) -> bool: ...

    def confirm_email(self, token: str) -> AccountInfo: ...

    def delete_account(self, uid: str) -> None: ...

def hash_password(password: str) -> str:
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_hex, hash_hex = stored.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, expected)


def _info(account: Account) -> AccountInfo:
    return AccountInfo(uid=account.uid, email=account.email, email_verified=bool(account.email_verified))


class SqlIdentityProvider:
    def __init__(self, session_factory, verify_url: str):
        self._session_factory = session_factory
        self.verify_url = verify_url

    def create_account(self, email: str, password: str) -> AccountInfo:
        email = email.strip().lower()
        db = self._session_factory()
        try:
            if db.query(Account).filter_by(email=email).first():
                raise IdentityError(EMAIL_IN_USE)
            account = Account(
                uid=uuid.uuid4().hex,
                email=email,
                password_hash=hash_password(password),
                email_verified=False,
            )
            db.add(account)
            db.commit()
            return _info(account)
        except IntegrityError as exc:
            # Lost a race with a concurrent signup for the same address.
            db.rollback()
            raise IdentityError(EMAIL_IN_USE) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(INTERNAL, str(exc)) from exc
        finally:
            db.close()

    def sign_in(self, email: str, password: str) -> AccountInfo:
        db = self._session_factory()
        try:
            account = db.query(Account).filter_by(email=email.strip().lower()).first()
            if account is None or not verify_password(password, account.password_hash):
                raise IdentityError(INVALID_CREDENTIAL)
            return _info(account)
        except SQLAlchemyError as exc:
            raise IdentityError(INTERNAL, str(exc)) from exc
        finally:
            db.close()

    def send_verification_email(self, uid: str) -> None:
        db = self._session_factory()
        try:
            account = db.get(Account, uid)
            if account is None:
                raise IdentityError(USER_NOT_FOUND)
            account.verification_token = secrets.token_urlsafe(32)
            db.commit()
            # No mail transport is configured; the link goes to the log.
            logger.info(
                "Verification link for %s: %s?token=%s",
                account.email, self.verify_url, account.verification_token,
            )
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(INTERNAL, str(exc)) from exc
        finally:
            db.close()

    def is_email_verified(self, uid: str) -> bool:
        db = self._session_factory()
        try:
            account = db.get(Account, uid)
            if account is None:
                raise IdentityError(USER_NOT_FOUND)
            return bool(account.email_verified)
        finally:
            db.close()

    def confirm_email(self, token: str) -> AccountInfo:
        db = self._session_factory()
        try:
            account = db.query(Account).filter_by(verification_token=token).first() if token else None
            if account is None:
                raise IdentityError(INVALID_ACTION_CODE)
            account.email_verified = True
            account.verification_token = None
            db.commit()
            return _info(account)
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(INTERNAL, str(exc)) from exc
        finally:
            db.close()

    def delete_account(self, uid: str) -> None:
        db = self._session_factory()
        try:
            account = db.get(Account, uid)
            if account is not None:
                db.delete(account)
                db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(INTERNAL, str(exc)) from exc
        finally:
            db.close()
