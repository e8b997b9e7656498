import pytest

from records.storage import MemoryKeyValueStore
from records.store import RecordStore, reset_store


@pytest.fixture(autouse=True)
def fresh_store():
    """Every test starts without a cached process-wide store."""
    reset_store()
    yield
    reset_store()


@pytest.fixture
def memory_store():
    return RecordStore(MemoryKeyValueStore())
