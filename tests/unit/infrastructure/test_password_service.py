"""Tests for PasswordService."""

from learntrack.infrastructure.identity.password_service import PasswordService


def test_hash_is_salted_and_verifiable() -> None:
    service = PasswordService(pepper="pepper")
    first = service.hash_password("secret123")
    second = service.hash_password("secret123")
    assert first != "secret123"
    assert first != second
    assert service.verify_password("secret123", first)
    assert not service.verify_password("secret124", first)


def test_pepper_is_part_of_the_hash() -> None:
    hashed = PasswordService(pepper="one").hash_password("secret123")
    assert not PasswordService(pepper="two").verify_password("secret123", hashed)


def test_unknown_hash_format_does_not_verify() -> None:
    assert not PasswordService().verify_password("secret123", "secret123")
