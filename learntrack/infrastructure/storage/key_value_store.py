"""Local keyed store holding JSON documents in a single table."""

import json
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from learntrack.database import session_scope
from learntrack.exceptions import PersistenceError
from learntrack.models import StorageEntry

logger = structlog.get_logger(__name__)


class KeyValueStore:
    """
    Keyed JSON store backed by the storage_entries table.

    Every public method opens its own short session and commits before
    returning. Failures surface as PersistenceError.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_json(self, key: str) -> Any | None:
        """
        Read and decode the document stored under a key.

        Args:
            key: Storage key

        Returns:
            Decoded JSON value, or None if the key is absent

        Raises:
            PersistenceError: If the store cannot be read or holds invalid JSON
        """
        try:
            with session_scope(self.session_factory) as db:
                stmt = select(StorageEntry.value).where(StorageEntry.key == key)
                raw = db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError("read", key, str(e)) from e

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError("decode", key, str(e)) from e

    def set_json(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under a key, replacing any previous one."""
        self.write_many({key: value})

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        self.write_many({}, delete_keys=[key])

    def write_many(self, values: dict[str, Any], delete_keys: list[str] | None = None) -> None:
        """
        Apply several writes and deletions in one commit.

        Either every change lands or none does.

        Raises:
            PersistenceError: If encoding or the commit fails
        """
        try:
            encoded = {key: json.dumps(value) for key, value in values.items()}
        except (TypeError, ValueError) as e:
            raise PersistenceError("encode", ",".join(values), str(e)) from e

        try:
            with session_scope(self.session_factory) as db:
                try:
                    for key, raw in encoded.items():
                        entry = db.get(StorageEntry, key)
                        if entry is None:
                            db.add(StorageEntry(key=key, value=raw))
                        else:
                            entry.value = raw
                    if delete_keys:
                        db.execute(delete(StorageEntry).where(StorageEntry.key.in_(delete_keys)))
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
        except SQLAlchemyError as e:
            raise PersistenceError("write", ",".join([*values, *(delete_keys or [])]), str(e)) from e

        logger.debug("store_written", keys=list(values), deleted=delete_keys or [])
