from dependency_injector import containers, providers

from learntrack.application.common.clock import SystemClock
from learntrack.application.common.id_generator import TimeOrderedIdGenerator
from learntrack.application.identity.services.identity_service import IdentityService
from learntrack.config import Settings
from learntrack.database import create_session_factory
from learntrack.infrastructure.identity.account_repository import AccountRepository
from learntrack.infrastructure.identity.password_service import PasswordService
from learntrack.infrastructure.storage.key_value_store import KeyValueStore
from learntrack.infrastructure.storage.persistence_gateway import PersistenceGateway


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Provided at startup
    settings = providers.Dependency(instance_of=Settings)

    clock = providers.Singleton(SystemClock)
    id_generator = providers.Singleton(TimeOrderedIdGenerator, clock=clock)

    # Local keyed store
    session_factory = providers.Singleton(create_session_factory, settings=settings)
    store = providers.Singleton(KeyValueStore, session_factory=session_factory)

    # Identity repositories and services
    account_repository = providers.Factory(AccountRepository, store=store)
    password_service = providers.Singleton(
        PasswordService, pepper=settings.provided.PASSWORD_PEPPER
    )
    identity_service = providers.Singleton(
        IdentityService,
        accounts=account_repository,
        password_service=password_service,
        clock=clock,
        id_generator=id_generator,
        allow_registrations=settings.provided.ALLOW_USER_REGISTRATIONS,
        min_password_length=settings.provided.MIN_PASSWORD_LENGTH,
    )

    # Learning
    persistence_gateway = providers.Singleton(PersistenceGateway, store=store, clock=clock)
