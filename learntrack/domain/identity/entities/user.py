"""User entity for identity management."""

from dataclasses import dataclass
from datetime import datetime

from learntrack.domain.common.entity import Entity
from learntrack.domain.common.exceptions import ValidationError
from learntrack.domain.common.value_objects.ids import UserId

# Domain constraints
MAX_EMAIL_LENGTH = 100


@dataclass
class User(Entity[UserId]):
    """
    User entity representing a registered account.

    Business Rules:
    - Email must be unique (enforced by the identity service)
    - Email must be non-empty and have reasonable length (max MAX_EMAIL_LENGTH chars)
    - Only a salted hash of the password is ever held
    - login_time is set while the user is authenticated and cleared on logout
    """

    id: UserId
    name: str
    email: str
    hashed_password: str
    phone: str = ""
    age: int | None = None
    gender: str = "male"
    login_time: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.email:
            raise ValidationError("Email cannot be empty", field="email", value=self.email)
        if len(self.email) > MAX_EMAIL_LENGTH:
            raise ValidationError(
                f"Email cannot exceed {MAX_EMAIL_LENGTH} characters", field="email", value=self.email
            )
        if not self.hashed_password:
            raise ValidationError("Password hash cannot be empty", field="hashed_password")

    @property
    def is_logged_in(self) -> bool:
        """Check if the user currently holds a login instant."""
        return self.login_time is not None

    def stamp_login(self, login_time: datetime) -> None:
        """Record the instant the user authenticated."""
        self.login_time = login_time

    def clear_login(self) -> None:
        """Forget the login instant on logout or forced timeout."""
        self.login_time = None

    @classmethod
    def create(
        cls,
        id: UserId,
        name: str,
        email: str,
        hashed_password: str,
        phone: str = "",
        age: int | None = None,
        gender: str = "male",
    ) -> "User":
        """
        Create a new user.

        Args:
            id: Freshly generated user ID
            name: Full name
            email: User's email address
            hashed_password: Salted hash of the user's password
            phone: Phone number including country code
            age: Age in years
            gender: Gender chosen at registration

        Returns:
            New User instance

        Raises:
            ValidationError: If email is invalid
        """
        return cls(
            id=id,
            name=name.strip(),
            email=email.strip(),
            hashed_password=hashed_password,
            phone=phone,
            age=age,
            gender=gender,
        )
