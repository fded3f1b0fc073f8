"""Password hashing and verification service."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError


class PasswordService:
    """
    Salted password hashing with an optional application-wide pepper.

    Uses pwdlib's recommended algorithm (Argon2); the salt is embedded
    in each hash.
    """

    def __init__(self, pepper: str = "") -> None:
        self.pepper = pepper
        self.password_hash = PasswordHash.recommended()

    def hash_password(self, plain_password: str) -> str:
        """Hash a plain password for storage with pepper."""
        return self.password_hash.hash(plain_password + self.pepper)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against a stored hash."""
        try:
            return self.password_hash.verify(plain_password + self.pepper, hashed_password)
        except UnknownHashError:
            return False
