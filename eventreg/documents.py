"""
Path-addressed JSON document store.

Paths look like ``users/<uid>/team/teamName``. The first two segments
name a document (one row in the ``documents`` table); any further
segments address a field nested inside it. Reading a single segment
returns the whole collection as ``{key: document}``. ``add`` creates a document
only when its row does not exist yet, relying on the primary key.
"""

import copy
import logging
import time
import uuid
from typing import Any, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eventreg.errors import GatewayError
from eventreg.models import Document

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def get(self, path: str) -> Optional[Any]: ...

    def set(self, path: str, value: Any) -> None: ...

    def push(self, path: str, value: Any) -> str: ...

    def add(self, path: str, value: Any) -> bool: ...

    def server_timestamp(self) -> int: ...


def split_path(path: str) -> list:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValueError("Document path must not be empty")
    return parts


class SqlDocumentStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, path: str) -> Optional[Any]:
        parts = split_path(path)
        db = self._session_factory()
        try:
            if len(parts) == 1:
                prefix = parts[0] + "/"
                rows = db.query(Document).filter(
                    Document.path.startswith(prefix, autoescape=True)
                ).all()
                if not rows:
                    return None
                return {row.path[len(prefix):]: copy.deepcopy(row.value) for row in rows}

            row = db.get(Document, "/".join(parts[:2]))
            if row is None:
                return None
            value = row.value
            for part in parts[2:]:
                if not isinstance(value, dict) or part not in value:
                    return None
                value = value[part]
            return copy.deepcopy(value)
        except SQLAlchemyError as exc:
            logger.exception("Failed to read %s", path)
            raise GatewayError("Failed to read from the document store") from exc
        finally:
            db.close()

    def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; ``None`` removes it."""
        parts = split_path(path)
        if len(parts) == 1:
            raise ValueError("Refusing to overwrite a whole collection")
        key = "/".join(parts[:2])

        db = self._session_factory()
        try:
            row = db.get(Document, key)
            if len(parts) == 2:
                new_value = copy.deepcopy(value)
            else:
                current = row.value if row is not None else None
                new_value = copy.deepcopy(current) if isinstance(current, dict) else {}
                node = new_value
                for part in parts[2:-1]:
                    child = node.get(part)
                    if not isinstance(child, dict):
                        child = {}
                        node[part] = child
                    node = child
                if value is None:
                    node.pop(parts[-1], None)
                else:
                    node[parts[-1]] = copy.deepcopy(value)

            if new_value is None:
                if row is not None:
                    db.delete(row)
            elif row is None:
                db.add(Document(path=key, value=new_value))
            else:
                row.value = new_value
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to write %s", path)
            raise GatewayError("Failed to write to the document store") from exc
        finally:
            db.close()

    def add(self, path: str, value: Any) -> bool:
        """Create the document at ``path`` only if it does not exist.

        Returns False when another writer got there first; the stored
        document is left untouched.
        """
        parts = split_path(path)
        if len(parts) != 2 or value is None:
            raise ValueError("add() takes a <collection>/<key> path and a value")

        db = self._session_factory()
        try:
            db.add(Document(path="/".join(parts), value=copy.deepcopy(value)))
            db.commit()
            return True
        except IntegrityError:
            db.rollback()
            return False
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to create %s", path)
            raise GatewayError("Failed to write to the document store") from exc
        finally:
            db.close()

    def push(self, path: str, value: Any) -> str:
        key = uuid.uuid4().hex
        self.set(f"{path.rstrip('/')}/{key}", value)
        return key

    def server_timestamp(self) -> int:
        # Milliseconds since the epoch, stamped by the store rather than the client.
        return int(time.time() * 1000)
