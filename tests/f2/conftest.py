"""Fixtures for F2 tests - Profile and Progress Ledger."""

import pytest

from lingueta.core.ledger import ProgressLedger
from lingueta.core.profile import MemoryProfileStore, create_user


@pytest.fixture
def store() -> MemoryProfileStore:
    """Memory store holding a fresh user."""
    return MemoryProfileStore(create_user("Ana"))


@pytest.fixture
def ledger(store, app_config, clock) -> ProgressLedger:
    return ProgressLedger(store, config=app_config, clock=clock)
