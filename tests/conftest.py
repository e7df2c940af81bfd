"""
Shared fixtures for the construction ledger tests.

Test strategy:
1. Unit tests for pure pieces (calculations, models, validators)
2. Store tests against the in-memory backend
3. File backend tests in pytest's tmp_path only
"""

from datetime import date

import pytest

from construction_ledger.ledger import IdGenerator, LedgerStore
from construction_ledger.models.ledger import Project
from construction_ledger.seed import LedgerSeed
from construction_ledger.services.storage import InMemoryStore, PersistenceAdapter


TODAY = date(2024, 1, 15)


class StepClock:
    """Deterministic clock for id generation: advances one millisecond per call."""

    def __init__(self, start: float = 1_700_000_000.0):
        self._now = start

    def __call__(self) -> float:
        self._now += 0.001
        return self._now


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def project():
    """The default project: 1650 INR/sqft over 625 sqft."""
    return Project(name="Test House", per_sqft_rate=1650, total_sqft=625)


@pytest.fixture
def kv_store():
    return InMemoryStore()


@pytest.fixture
def adapter(kv_store):
    return PersistenceAdapter(kv_store)


@pytest.fixture
def make_store(project, adapter):
    """Factory for an opened store; pass a LedgerSeed to start from it."""

    def _make(seed: LedgerSeed = None) -> LedgerStore:
        store = LedgerStore(
            project,
            id_generator=IdGenerator(clock=StepClock()),
            today=lambda: TODAY,
        )
        return store.open(adapter, seed or LedgerSeed())

    return _make


@pytest.fixture
def store(make_store):
    """An opened, empty store."""
    return make_store()
