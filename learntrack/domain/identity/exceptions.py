"""Identity domain exceptions."""

from learntrack.domain.common.exceptions import DomainError


class UserNotFoundError(DomainError):
    """Raised when no account matches the given email."""

    def __init__(self, email: str) -> None:
        super().__init__("User not found", {"email": email})
        self.email = email


class EmailAlreadyRegisteredError(DomainError):
    """Raised when attempting to register with an email that already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already registered", {"email": email})
        self.email = email


class InvalidPasswordError(DomainError):
    """Raised when the password does not match the account's hash."""

    def __init__(self) -> None:
        super().__init__("Invalid password")


class RegistrationDisabledError(DomainError):
    """Raised when user registration is disabled in settings."""

    def __init__(self) -> None:
        super().__init__("User registration is currently disabled")


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs an authenticated user and there is none."""

    def __init__(self) -> None:
        super().__init__("No user is currently authenticated")
