"""Application service for registration, login and the authenticated session."""

from collections.abc import Mapping
from typing import Any

import structlog

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.id_generator import TimeOrderedIdGenerator
from learntrack.application.common.result import Failure, FieldErrors, Result, Success
from learntrack.application.common.validation import validate_form
from learntrack.application.identity.inputs import LoginInput, RegistrationInput
from learntrack.application.identity.protocols import (
    AccountStoreProtocol,
    PasswordServiceProtocol,
)
from learntrack.domain.common.exceptions import DomainError
from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.identity.entities.user import User
from learntrack.domain.identity.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidPasswordError,
    RegistrationDisabledError,
    UserNotFoundError,
)
from learntrack.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

PASSWORD_RESET_MESSAGE = (
    "If an account exists for {email}, you will receive a password reset email."
)

RegistrationError = FieldErrors | DomainError | PersistenceError
LoginError = UserNotFoundError | InvalidPasswordError | PersistenceError


class IdentityService:
    """
    Identity store: registered accounts plus the single authenticated user.

    At most one user is authenticated at a time. Logging in replaces any
    previous session.
    """

    def __init__(
        self,
        accounts: AccountStoreProtocol,
        password_service: PasswordServiceProtocol,
        clock: ClockProtocol,
        id_generator: TimeOrderedIdGenerator,
        *,
        allow_registrations: bool = True,
        min_password_length: int = 6,
    ) -> None:
        """Initialize service with dependencies."""
        self.accounts = accounts
        self.password_service = password_service
        self.clock = clock
        self.id_generator = id_generator
        self.allow_registrations = allow_registrations
        self.min_password_length = min_password_length
        self._current_user: User | None = None

    @property
    def current_user(self) -> User | None:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        """The only question the routing layer asks."""
        return self._current_user is not None

    def register(self, form: Mapping[str, Any]) -> Result[User, RegistrationError]:
        """
        Register a new account and authenticate it immediately.

        Args:
            form: Raw registration payload (see RegistrationInput)

        Returns:
            Success with the authenticated user, or Failure with field errors,
            RegistrationDisabledError, EmailAlreadyRegisteredError or PersistenceError.
            On failure the account collection is left untouched; the new
            account and the authenticated session are stored in one commit.
        """
        validated = validate_form(
            RegistrationInput, form, context={"min_password_length": self.min_password_length}
        )
        if validated.is_failure:
            return validated
        data = validated.unwrap()

        if not self.allow_registrations:
            return Failure(RegistrationDisabledError())

        try:
            if self.accounts.email_exists(data.email):
                logger.info("registration_rejected_duplicate_email", email=data.email)
                return Failure(EmailAlreadyRegisteredError(data.email))

            taken = {account.id.value for account in self.accounts.list_accounts()}
            user = User.create(
                id=self._new_user_id(taken),
                name=data.name,
                email=data.email,
                hashed_password=self.password_service.hash_password(data.password),
                phone=data.full_phone,
                age=data.age,
                gender=data.gender,
            )
            self._authenticate(user, new=True)
        except PersistenceError as e:
            logger.error("registration_failed", email=data.email, error=e.message)
            return Failure(e)

        logger.info("user_registered", user_id=user.id.value, email=user.email)
        return Success(user)

    def login(self, email: str, password: str) -> Result[User, LoginError]:
        """
        Authenticate a user with email and password.

        Args:
            email: User's email address
            password: User's plain text password

        Returns:
            Success with the user carrying a fresh login instant, or Failure
            with UserNotFoundError, InvalidPasswordError or PersistenceError
        """
        credentials = LoginInput(email=email, password=password)
        try:
            user = self.accounts.find_by_email(credentials.email)
            if user is None:
                return Failure(UserNotFoundError(credentials.email))

            if not self.password_service.verify_password(
                credentials.password, user.hashed_password
            ):
                logger.info("login_rejected_invalid_password", user_id=user.id.value)
                return Failure(InvalidPasswordError())

            self._authenticate(user)
        except PersistenceError as e:
            logger.error("login_failed", email=credentials.email, error=e.message)
            return Failure(e)

        logger.info("user_authenticated", user_id=user.id.value)
        return Success(user)

    def logout(self) -> User | None:
        """
        Clear the authenticated session.

        Returns:
            The user who was logged out, or None if nobody was logged in
        """
        user = self._current_user
        self._current_user = None
        if user is None:
            return None

        user.clear_login()
        try:
            self.accounts.clear_current_session()
            self.accounts.update(user)
        except PersistenceError as e:
            logger.warning("logout_not_persisted", user_id=user.id.value, error=e.message)

        logger.info("user_logged_out", user_id=user.id.value)
        return user

    def restore(self) -> User | None:
        """
        Re-establish the stored authenticated session after a restart.

        Returns:
            The restored user, or None when no valid session is stored
        """
        try:
            stored = self.accounts.get_current_session()
            if stored is None:
                return None
            user_id, login_time = stored
            user = self.accounts.find_by_id(user_id)
        except PersistenceError as e:
            logger.warning("session_restore_failed", error=e.message)
            return None

        if user is None:
            return None
        user.stamp_login(login_time)
        self._current_user = user
        logger.info("session_restored", user_id=user.id.value)
        return user

    def request_password_reset(self, email: str) -> str:
        """
        Stub of the password reset flow. No mail is sent.

        The message never reveals whether the account exists.
        """
        logger.info("password_reset_requested")
        return PASSWORD_RESET_MESSAGE.format(email=email.strip())

    def _authenticate(self, user: User, *, new: bool = False) -> None:
        login_time = self.clock.now()
        user.stamp_login(login_time)
        if new:
            self.accounts.add(user, login_time=login_time)
        else:
            self.accounts.update(user, login_time=login_time)
        self._current_user = user

    def _new_user_id(self, taken: set[str]) -> UserId:
        return UserId(self.id_generator.next_id(taken))
