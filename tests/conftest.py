import itertools

import pytest

from expense_core.exceptions import PersistenceReadError, PersistenceWriteError
from expense_core.services import ExpenseStore
from expense_core.storage import MemoryStorage


class FailingStorage(MemoryStorage):
    """Memory storage whose reads and/or writes can be switched to fail."""

    def __init__(self, initial=None, fail_reads=False, fail_writes=False):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = 0

    def read(self, key):
        if self.fail_reads:
            raise PersistenceReadError("storage unavailable")
        return super().read(key)

    def write(self, key, value):
        if self.fail_writes:
            raise PersistenceWriteError("quota exceeded")
        self.writes += 1
        super().write(key, value)


@pytest.fixture
def storage():
    return FailingStorage()


@pytest.fixture
def clock():
    """Deterministic millisecond clock that advances by one per call."""
    ticks = itertools.count(1_704_067_200_000)
    return lambda: next(ticks)


@pytest.fixture
def store(storage, clock):
    expense_store = ExpenseStore(storage, clock=clock)
    expense_store.load()
    return expense_store
