from collections.abc import Generator

import pytest

from src.platform.config.di import container


@pytest.fixture(autouse=True)
def clean_in_memory_store(client) -> Generator[None, None, None]:
    """Every API test starts from an empty store"""
    container.in_memory_store().clear()
    yield
    container.in_memory_store().clear()
