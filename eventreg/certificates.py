import logging

from eventreg.blobs import BlobStore
from eventreg.documents import DocumentStore
from eventreg.errors import NotFoundError
from eventreg.schemas import CertificateDetails
from eventreg.teams import check_size, safe_filename

logger = logging.getLogger(__name__)


def upload_certificate(blobs: BlobStore, filename: str, data: bytes,
                       content_type: str = None, max_mb: int = 10) -> str:
    check_size(data, max_mb)
    return blobs.upload(f"certificates/{safe_filename(filename)}", data, content_type)


def save_details(documents: DocumentStore, details: CertificateDetails) -> dict:
    record = {**details.model_dump(exclude_none=True), "issuedAt": documents.server_timestamp()}
    documents.set(f"certificates/{details.authCode}", record)
    logger.info("Saved certificate %s for %s", details.authCode, details.name)
    return record


def lookup(documents: DocumentStore, auth_code: str) -> dict:
    record = documents.get(f"certificates/{auth_code}")
    if not record:
        raise NotFoundError("Certificate not found")
    return record
