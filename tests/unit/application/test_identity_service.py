"""Tests for IdentityService."""

from learntrack.application.identity.services.identity_service import IdentityService
from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.identity.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidPasswordError,
    RegistrationDisabledError,
    UserNotFoundError,
)
from learntrack.exceptions import PersistenceError
from learntrack.infrastructure.identity.account_repository import (
    ACCOUNTS_KEY,
    CURRENT_USER_KEY,
    AccountRepository,
)
from learntrack.infrastructure.identity.password_service import PasswordService
from learntrack.infrastructure.storage.key_value_store import KeyValueStore


class SessionWriteFailingStore(KeyValueStore):
    """Store whose writes touching the authenticated session fail."""

    fail = True

    def write_many(self, values, delete_keys=None) -> None:
        if self.fail and CURRENT_USER_KEY in values:
            raise PersistenceError("write", CURRENT_USER_KEY, "disk full")
        super().write_many(values, delete_keys)


class TestRegister:
    def test_register_authenticates_new_user(
        self, identity_service: IdentityService, registration_form, clock
    ) -> None:
        user = identity_service.register(registration_form).unwrap()
        assert user.name == "Ada Lovelace"
        assert user.phone == "+447700900123"
        assert user.login_time == clock.now()
        assert identity_service.is_authenticated
        assert identity_service.current_user is user

    def test_plaintext_password_is_never_stored(
        self, identity_service: IdentityService, registration_form, store: KeyValueStore
    ) -> None:
        identity_service.register(registration_form)
        stored = store.get_json(ACCOUNTS_KEY)
        assert len(stored) == 1
        assert "password" not in stored[0]
        assert stored[0]["passwordHash"] != "analytical"
        assert "analytical" not in str(stored)

    def test_duplicate_email_leaves_accounts_untouched(
        self, identity_service: IdentityService, registration_form, store: KeyValueStore
    ) -> None:
        identity_service.register(registration_form)
        before = store.get_json(ACCOUNTS_KEY)

        duplicate = {**registration_form, "name": "Impostor", "email": " ADA@example.com "}
        result = identity_service.register(duplicate)

        assert isinstance(result.unwrap_error(), EmailAlreadyRegisteredError)
        assert result.unwrap_error().message == "Email already registered"
        assert store.get_json(ACCOUNTS_KEY) == before

    def test_field_errors(self, identity_service: IdentityService, registration_form) -> None:
        form = {
            **registration_form,
            "name": "",
            "email": "not-an-email",
            "age": 130,
            "password": "abc",
            "confirm_password": "abd",
        }
        errors = identity_service.register(form).unwrap_error()
        assert errors["name"] == "Full name is required"
        assert errors["email"] == "Please enter a valid email address"
        assert "age" in errors
        assert errors["password"] == "Password must be at least 6 characters"
        assert "confirm_password" not in errors
        assert not identity_service.is_authenticated

    def test_password_mismatch(self, identity_service: IdentityService, registration_form) -> None:
        form = {**registration_form, "confirm_password": "analytica1"}
        errors = identity_service.register(form).unwrap_error()
        assert errors == {"confirm_password": "Passwords do not match"}

    def test_phone_is_trimmed_to_country_digits(
        self, identity_service: IdentityService, registration_form
    ) -> None:
        form = {**registration_form, "country_code": "+971", "phone": "050-123-45678"}
        user = identity_service.register(form).unwrap()
        assert user.phone == "+971050123456"

    def test_registration_disabled(
        self,
        accounts: AccountRepository,
        password_service: PasswordService,
        clock,
        id_generator,
        registration_form,
    ) -> None:
        service = IdentityService(
            accounts, password_service, clock, id_generator, allow_registrations=False
        )
        result = service.register(registration_form)
        assert isinstance(result.unwrap_error(), RegistrationDisabledError)
        assert accounts.list_accounts() == []

    def test_failed_registration_write_stores_nothing(
        self,
        store: KeyValueStore,
        password_service: PasswordService,
        clock,
        id_generator,
        registration_form,
    ) -> None:
        failing = SessionWriteFailingStore(store.session_factory)
        service = IdentityService(AccountRepository(failing), password_service, clock, id_generator)

        result = service.register(registration_form)

        assert isinstance(result.unwrap_error(), PersistenceError)
        assert store.get_json(ACCOUNTS_KEY) is None
        assert store.get_json(CURRENT_USER_KEY) is None

        failing.fail = False
        assert service.register(registration_form).is_success


class TestLogin:
    def test_login_with_valid_credentials(
        self, identity_service: IdentityService, registration_form, clock
    ) -> None:
        identity_service.register(registration_form)
        identity_service.logout()
        clock.advance(minutes=5)

        user = identity_service.login("  Ada@Example.com", "analytical").unwrap()

        assert user.login_time == clock.now()
        assert identity_service.current_user is user

    def test_unknown_email(self, identity_service: IdentityService) -> None:
        error = identity_service.login("nobody@example.com", "whatever").unwrap_error()
        assert isinstance(error, UserNotFoundError)
        assert error.message == "User not found"

    def test_wrong_password(self, identity_service: IdentityService, registration_form) -> None:
        identity_service.register(registration_form)
        identity_service.logout()
        error = identity_service.login("ada@example.com", "wrong-password").unwrap_error()
        assert isinstance(error, InvalidPasswordError)
        assert not identity_service.is_authenticated


class TestSession:
    def test_logout_clears_session(
        self, identity_service: IdentityService, registration_form, store: KeyValueStore
    ) -> None:
        identity_service.register(registration_form)
        assert store.get_json(CURRENT_USER_KEY) is not None

        user = identity_service.logout()

        assert user is not None
        assert user.login_time is None
        assert not identity_service.is_authenticated
        assert store.get_json(CURRENT_USER_KEY) is None
        assert identity_service.logout() is None

    def test_restore_after_restart(
        self,
        identity_service: IdentityService,
        registration_form,
        accounts: AccountRepository,
        password_service: PasswordService,
        clock,
        id_generator,
    ) -> None:
        registered = identity_service.register(registration_form).unwrap()

        restarted = IdentityService(accounts, password_service, clock, id_generator)
        user = restarted.restore()

        assert user is not None
        assert user.id == UserId(registered.id.value)
        assert user.login_time == registered.login_time
        assert restarted.is_authenticated

    def test_restore_without_stored_session(self, identity_service: IdentityService) -> None:
        assert identity_service.restore() is None


def test_password_reset_message_is_neutral(identity_service: IdentityService) -> None:
    message = identity_service.request_password_reset(" someone@example.com ")
    assert message == (
        "If an account exists for someone@example.com, you will receive a password reset email."
    )
