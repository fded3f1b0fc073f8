"""Repository for accounts and the authenticated session in the keyed store."""

from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.identity.entities.user import User
from learntrack.exceptions import PersistenceError
from learntrack.infrastructure.storage.key_value_store import KeyValueStore
from learntrack.infrastructure.storage.mappers import AccountMapper, from_iso, to_iso
from learntrack.infrastructure.storage.schemas import AccountRecord, CurrentSessionRecord

logger = structlog.get_logger(__name__)

ACCOUNTS_KEY = "users"
CURRENT_USER_KEY = "currentUser"


class AccountRepository:
    """
    Account collection stored as a list under the users key.

    Methods raise PersistenceError when the store cannot be read or written.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.mapper = AccountMapper()

    def list_accounts(self) -> list[User]:
        """Return every registered account in registration order."""
        return [self.mapper.to_domain(record) for record in self._read_records()]

    def find_by_email(self, email: str) -> User | None:
        """
        Find an account by email.

        Args:
            email: The user's email address

        Returns:
            User entity if found, None otherwise
        """
        for record in self._read_records():
            if record.email == email:
                return self.mapper.to_domain(record)
        return None

    def find_by_id(self, user_id: UserId) -> User | None:
        for record in self._read_records():
            if record.id == user_id.value:
                return self.mapper.to_domain(record)
        return None

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def add(self, user: User, *, login_time: datetime | None = None) -> User:
        """
        Append a new account to the collection.

        With login_time, the account becomes the authenticated session in
        the same commit.
        """
        records = self._read_records()
        records.append(self.mapper.to_record(user))
        self._write_records(records, self._session_for(user, login_time))
        logger.info("account_created", user_id=user.id.value)
        return user

    def update(self, user: User, *, login_time: datetime | None = None) -> User:
        """
        Replace the stored account with the same ID.

        With login_time, the account becomes the authenticated session in
        the same commit.

        Raises:
            PersistenceError: If no such account is stored
        """
        records = self._read_records()
        for index, record in enumerate(records):
            if record.id == user.id.value:
                records[index] = self.mapper.to_record(user)
                self._write_records(records, self._session_for(user, login_time))
                return user
        raise PersistenceError("update", ACCOUNTS_KEY, f"account {user.id.value} not stored")

    def get_current_session(self) -> tuple[UserId, datetime] | None:
        """Return the stored authenticated user and login instant, if any."""
        raw = self.store.get_json(CURRENT_USER_KEY)
        if not raw:
            return None
        try:
            record = CurrentSessionRecord.model_validate(raw)
            return UserId(record.user_id), from_iso(record.login_time)
        except (PydanticValidationError, ValueError) as e:
            logger.warning("current_session_unreadable", error=str(e))
            return None

    def clear_current_session(self) -> None:
        self.store.delete(CURRENT_USER_KEY)

    def _read_records(self) -> list[AccountRecord]:
        raw: Any = self.store.get_json(ACCOUNTS_KEY) or []
        if not isinstance(raw, list):
            raise PersistenceError("decode", ACCOUNTS_KEY, "expected a list of accounts")
        try:
            return [AccountRecord.model_validate(item) for item in raw]
        except PydanticValidationError as e:
            raise PersistenceError("decode", ACCOUNTS_KEY, str(e)) from e

    @staticmethod
    def _session_for(user: User, login_time: datetime | None) -> CurrentSessionRecord | None:
        if login_time is None:
            return None
        return CurrentSessionRecord(user_id=user.id.value, login_time=to_iso(login_time))

    def _write_records(
        self, records: list[AccountRecord], session: CurrentSessionRecord | None = None
    ) -> None:
        values: dict[str, Any] = {
            ACCOUNTS_KEY: [
                record.model_dump(by_alias=True, exclude_none=True) for record in records
            ]
        }
        if session is not None:
            values[CURRENT_USER_KEY] = session.model_dump(by_alias=True)
        self.store.write_many(values)
