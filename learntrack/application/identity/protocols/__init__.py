from .account_store import AccountStoreProtocol
from .password_service import PasswordServiceProtocol

__all__ = [
    "AccountStoreProtocol",
    "PasswordServiceProtocol",
]
