"""
User profile reads, team registration and per-user uploads.

Team registration fetches the whole user document, merges the team in
memory and writes the whole document back. Concurrent writers to the
same document are last-writer-wins.
"""

import logging
import os

from eventreg.blobs import BlobStore
from eventreg.documents import DocumentStore
from eventreg.errors import NotFoundError, ValidationError
from eventreg.schemas import TeamRegistration

logger = logging.getLogger(__name__)


def get_profile(documents: DocumentStore, uid: str) -> dict:
    user = documents.get(f"users/{uid}")
    if not user:
        raise NotFoundError("User not found")
    return user


def build_team(registration: TeamRegistration) -> dict:
    form = registration.formDetails
    return {
        "teamName": form.teamName,
        "country": form.country,
        "institutionName": form.institutionName,
        "teamLeader": form.teamLeader.model_dump(),
        "teamMembers": [member.model_dump() for member in registration.teamMembers],
    }


def register_team(documents: DocumentStore, uid: str, registration: TeamRegistration) -> dict:
    path = f"users/{uid}"
    user = documents.get(path)
    if not user:
        raise NotFoundError("User not found")

    merged = {**user, "team": build_team(registration), "registrationStatus": "registered"}
    documents.set(path, merged)
    logger.info("Team %r registered for user %s", registration.formDetails.teamName, uid)
    return merged


def safe_filename(filename: str) -> str:
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    if name in ("", ".", ".."):
        raise ValidationError("Invalid file name")
    return name


def check_size(data: bytes, max_mb: int) -> None:
    if not data:
        raise ValidationError("Uploaded file is empty")
    if len(data) > max_mb * 1024 * 1024:
        raise ValidationError(f"File exceeds {max_mb}MB")


def upload_user_file(
    documents: DocumentStore,
    blobs: BlobStore,
    uid: str,
    folder: str,
    field: str,
    filename: str,
    data: bytes,
    content_type: str = None,
    max_mb: int = 10,
) -> str:
    """Store a file under ``<folder>/<uid>/`` and record its URL on the user document."""
    check_size(data, max_mb)
    url = blobs.upload(f"{folder}/{uid}/{safe_filename(filename)}", data, content_type)
    documents.set(f"users/{uid}/{field}", url)
    return url


def upload_team_image(documents, blobs, uid, filename, data, content_type=None, max_mb=10) -> str:
    return upload_user_file(documents, blobs, uid, "teamImages", "teamImageUrl",
                            filename, data, content_type, max_mb)


def upload_resume(documents, blobs, uid, filename, data, content_type=None, max_mb=10) -> str:
    return upload_user_file(documents, blobs, uid, "resumes", "resumeUrl",
                            filename, data, content_type, max_mb)
