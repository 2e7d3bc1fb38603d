"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.box_office.app.service.inventory_ledger import InventoryLedger
from src.service.box_office.domain.ticket_credential_codec import TicketCredentialCodec
from src.service.box_office.driven_adapter.memory.in_memory_store import (
    InMemoryStore,
    InMemoryUnitOfWork,
)
from src.service.box_office.driven_adapter.notification.in_memory_notification_dispatcher import (
    InMemoryNotificationDispatcher,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from core_setting)
    database = providers.Singleton(Database)

    # Single-process store (STORE_BACKEND=memory)
    in_memory_store = providers.Singleton(InMemoryStore)

    # Unit of work factories; use cases receive the factory and open one UoW per operation
    sqlalchemy_unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session_maker
    )
    in_memory_unit_of_work = providers.Factory(InMemoryUnitOfWork, store=in_memory_store)
    unit_of_work_factory = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=sqlalchemy_unit_of_work.provider,
        memory=in_memory_unit_of_work.provider,
    )

    # Domain services
    ticket_credential_codec = providers.Singleton(TicketCredentialCodec)
    inventory_ledger = providers.Singleton(
        InventoryLedger,
        max_attempts=config_service.provided.LEDGER_MAX_ATTEMPTS,
        backoff_base_seconds=config_service.provided.LEDGER_BACKOFF_BASE_SECONDS,
        backoff_max_seconds=config_service.provided.LEDGER_BACKOFF_MAX_SECONDS,
    )

    # Notifications (after-commit, best effort)
    notification_dispatcher = providers.Singleton(InMemoryNotificationDispatcher)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
