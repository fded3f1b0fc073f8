from datetime import datetime
from typing import Protocol

from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.identity.entities.user import User


class AccountStoreProtocol(Protocol):
    def list_accounts(self) -> list[User]: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: UserId) -> User | None: ...

    def email_exists(self, email: str) -> bool: ...

    def add(self, user: User, *, login_time: datetime | None = None) -> User: ...

    def update(self, user: User, *, login_time: datetime | None = None) -> User: ...

    def get_current_session(self) -> tuple[UserId, datetime] | None: ...

    def clear_current_session(self) -> None: ...
