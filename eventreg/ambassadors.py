import logging

from eventreg.documents import DocumentStore
from eventreg.schemas import CampusAmbassadorApplication

logger = logging.getLogger(__name__)


def apply(documents: DocumentStore, application: CampusAmbassadorApplication) -> str:
    entry = {**application.model_dump(exclude_none=True), "createdAt": documents.server_timestamp()}
    key = documents.push("campusAmbassadors", entry)
    logger.info("Campus ambassador application %s from %s", key, application.email)
    return key
