import logging
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

from eventreg.errors import GatewayError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str: ...


class LocalBlobStore:
    """Writes blobs under ``root`` and hands back URLs served from ``/files``."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _target(self, path: str) -> Path:
        target = (self.root / path.strip("/")).resolve()
        if self.root not in target.parents:
            raise ValueError(f"Blob path escapes the storage root: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._target(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.exception("Failed to store blob %s", path)
            raise GatewayError("Failed to store file") from exc

        logger.info("Stored %d bytes at %s (%s)", len(data), path, content_type or "unknown type")
        return f"{self.base_url}/files/{quote(path.strip('/'))}"
