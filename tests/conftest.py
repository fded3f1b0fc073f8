"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, date, datetime, timedelta

import pytest
from dependency_injector import providers
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from learntrack import models  # noqa: F401
from learntrack.app import LearnTrack
from learntrack.application.common.id_generator import TimeOrderedIdGenerator
from learntrack.application.identity.services.identity_service import IdentityService
from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.config import Settings
from learntrack.core import Container
from learntrack.database import Base
from learntrack.domain.common.value_objects.ids import UserId
from learntrack.infrastructure.identity.account_repository import AccountRepository
from learntrack.infrastructure.identity.password_service import PasswordService
from learntrack.infrastructure.storage.key_value_store import KeyValueStore
from learntrack.infrastructure.storage.persistence_gateway import PersistenceGateway

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# Noon UTC, so a target date of "today" has already expired
FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Fresh in-memory keyed store for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def store(session_factory: sessionmaker[Session]) -> KeyValueStore:
    return KeyValueStore(session_factory)


@pytest.fixture
def id_generator(clock: FakeClock) -> TimeOrderedIdGenerator:
    return TimeOrderedIdGenerator(clock)


@pytest.fixture
def gateway(store: KeyValueStore, clock: FakeClock) -> PersistenceGateway:
    return PersistenceGateway(store, clock)


@pytest.fixture
def repository(
    gateway: PersistenceGateway, clock: FakeClock, id_generator: TimeOrderedIdGenerator
) -> LearningRepository:
    return LearningRepository(UserId("u1"), gateway, clock, id_generator)


@pytest.fixture
def password_service() -> PasswordService:
    return PasswordService(pepper="test-pepper")


@pytest.fixture
def accounts(store: KeyValueStore) -> AccountRepository:
    return AccountRepository(store)


@pytest.fixture
def identity_service(
    accounts: AccountRepository,
    password_service: PasswordService,
    clock: FakeClock,
    id_generator: TimeOrderedIdGenerator,
) -> IdentityService:
    return IdentityService(accounts, password_service, clock, id_generator)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        ENVIRONMENT="test",
        PASSWORD_PEPPER="test-pepper",
    )


@pytest.fixture
def container(
    settings: Settings, session_factory: sessionmaker[Session], clock: FakeClock
) -> Generator[Container, None, None]:
    """Container wired to the in-memory store and the fake clock."""
    container = Container()
    container.settings.override(settings)
    container.session_factory.override(providers.Object(session_factory))
    container.clock.override(providers.Object(clock))
    try:
        yield container
    finally:
        container.reset_singletons()


@pytest.fixture
def app(container: Container) -> LearnTrack:
    return LearnTrack(container)


@pytest.fixture
def registration_form() -> dict[str, object]:
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "country_code": "+44",
        "phone": "7700 900123",
        "age": 36,
        "gender": "female",
        "password": "analytical",
        "confirm_password": "analytical",
    }
