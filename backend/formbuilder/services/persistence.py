"""Persistence gateways: key-value blob stores the form store writes to."""

import logging
from typing import Dict, Optional, Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from formbuilder.database import create_db_engine, create_session_factory
from formbuilder.exceptions import PersistenceError
from formbuilder.models.blob import KeyValueBlob

logger = logging.getLogger(__name__)


class PersistenceGateway(Protocol):
    """A key-value store of serialized blobs."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the blob stored under ``key``, or None when absent."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Replace the blob stored under ``key``; raises PersistenceError on failure."""
        ...

    def close(self) -> None:
        ...


class InMemoryGateway:
    """Process-local gateway; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._blobs: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)

    def close(self) -> None:
        pass


class SqlAlchemyGateway:
    """Gateway storing each key as one row of the ``kv_blobs`` table."""

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "SqlAlchemyGateway":
        """Create a gateway (and its table) for a database URL."""
        engine = create_db_engine(database_url)
        return cls(create_session_factory(engine), engine)

    def get(self, key: str) -> Optional[bytes]:
        try:
            with self._session_factory() as db:
                blob = db.query(KeyValueBlob).filter(KeyValueBlob.key == key).first()
                return blob.value if blob else None
        except SQLAlchemyError as exc:
            logger.exception("Failed to read blob %s", key)
            raise PersistenceError(f"Could not read '{key}' from storage") from exc

    def set(self, key: str, value: bytes) -> None:
        try:
            with self._session_factory() as db:
                blob = db.query(KeyValueBlob).filter(KeyValueBlob.key == key).first()
                if blob is None:
                    db.add(KeyValueBlob(key=key, value=value))
                else:
                    blob.value = value
                db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to write blob %s", key)
            raise PersistenceError(f"Could not write '{key}' to storage") from exc

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
