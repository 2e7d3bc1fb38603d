"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module is imported
- An in-memory store, unit-of-work factory and ledger for use-case tests
- Event and booking seeding helpers

Architecture:
- Unit tests (test/**/unit/): pure domain and use cases over the in-memory store
- API tests (test/**/api/): FastAPI TestClient against the in-memory store
- Integration tests (test/**/integration/): real PostgreSQL, skipped when unreachable
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the DI container read the environment at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['STORE_BACKEND'] = 'memory'
    os.environ.setdefault('POSTGRES_DB', 'box_office_test_db')
    os.environ.setdefault('LEDGER_BACKOFF_BASE_SECONDS', '0.001')
    os.environ.setdefault('LEDGER_BACKOFF_MAX_SECONDS', '0.01')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from src.platform.database.unit_of_work import UnitOfWorkFactory  # noqa: E402
from src.service.box_office.app.interface.i_notification_dispatcher import (  # noqa: E402
    INotificationDispatcher,
)
from src.service.box_office.app.service.inventory_ledger import InventoryLedger  # noqa: E402
from src.service.box_office.domain.ticket_credential_codec import (  # noqa: E402
    TicketCredentialCodec,
)
from src.service.box_office.driven_adapter.memory.in_memory_store import (  # noqa: E402
    InMemoryStore,
    InMemoryUnitOfWork,
)
from test.service.box_office.test_helpers import EventSeeder  # noqa: E402


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore) -> UnitOfWorkFactory:
    def factory() -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(store=store)

    return factory


@pytest.fixture
def ledger() -> InventoryLedger:
    # Generous attempts so contention tests only ever end in OutOfStock by stock
    return InventoryLedger(max_attempts=100, backoff_base_seconds=0.0005, backoff_max_seconds=0.005)


@pytest.fixture
def codec() -> TicketCredentialCodec:
    return TicketCredentialCodec()


@pytest.fixture
def notification_dispatcher() -> AsyncMock:
    return AsyncMock(spec=INotificationDispatcher)


@pytest.fixture
def seed(store: InMemoryStore) -> EventSeeder:
    """Seed events and bookings straight into the store"""
    return EventSeeder(store=store)


@pytest.fixture(scope='session')
def client() -> Generator[Any, None, None]:
    from fastapi.testclient import TestClient

    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
