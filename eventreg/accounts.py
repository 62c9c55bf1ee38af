import logging

from eventreg.auth import create_access_token
from eventreg.documents import DocumentStore
from eventreg.errors import AuthError, ConflictError, GatewayError, ValidationError
from eventreg.identity import (
    EMAIL_IN_USE,
    INVALID_ACTION_CODE,
    INVALID_CREDENTIAL,
    USER_NOT_FOUND,
    IdentityError,
    IdentityProvider,
)

logger = logging.getLogger(__name__)


def register(identity: IdentityProvider, documents: DocumentStore, email: str, password: str) -> str:
    """Create the account and its user document, send verification, return a token."""
    try:
        account = identity.create_account(email, password)
    except IdentityError as exc:
        if exc.code == EMAIL_IN_USE:
            raise ConflictError("Email is already in use")
        logger.error("Error registering user: %s", exc)
        raise GatewayError("Error registering user") from exc

    try:
        documents.set(f"users/{account.uid}", {"uid": account.uid, "email": account.email})
        identity.send_verification_email(account.uid)
    except (IdentityError, GatewayError) as exc:
        logger.error("Error registering user %s, rolling back account: %s", account.email, exc)
        _discard_account(identity, documents, account.uid)
        raise GatewayError("Error registering user") from exc

    logger.info("Registered user %s", account.uid)
    return create_access_token(account.uid)


def _discard_account(identity: IdentityProvider, documents: DocumentStore, uid: str) -> None:
    """Undo a partial signup so the same email can register again."""
    try:
        identity.delete_account(uid)
    except IdentityError:
        logger.exception("Could not delete account %s; its email stays taken", uid)
    try:
        documents.set(f"users/{uid}", None)
    except GatewayError:
        logger.exception("Could not remove user document for %s", uid)


def login(identity: IdentityProvider, email: str, password: str) -> str:
    try:
        account = identity.sign_in(email, password)
    except IdentityError as exc:
        if exc.code in (INVALID_CREDENTIAL, USER_NOT_FOUND):
            raise AuthError("Invalid email or password")
        logger.error("Error logging in: %s", exc)
        raise GatewayError("Error logging in") from exc
    return create_access_token(account.uid)


def check_verification(identity: IdentityProvider, email: str, password: str) -> bool:
    try:
        account = identity.sign_in(email, password)
        return identity.is_email_verified(account.uid)
    except IdentityError as exc:
        if exc.code in (INVALID_CREDENTIAL, USER_NOT_FOUND):
            raise AuthError("Invalid email or password")
        raise GatewayError("Error checking verification") from exc


def confirm_email(identity: IdentityProvider, token: str) -> str:
    try:
        account = identity.confirm_email(token)
    except IdentityError as exc:
        if exc.code == INVALID_ACTION_CODE:
            raise ValidationError("Invalid or expired verification link")
        raise GatewayError("Error verifying email") from exc
    logger.info("Email verified for %s", account.uid)
    return account.email
