"""Shared pytest fixtures: in-memory storage fake and a controllable clock."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from foodcart.core.exceptions import StorageException

T0 = 1_700_000_000_000


@dataclass
class FakeStore:
    data: dict[str, str] = field(default_factory=dict)
    fail_reads: set[str] = field(default_factory=set)
    fail_writes: set[str] = field(default_factory=set)
    set_calls: list[str] = field(default_factory=list)

    def get(self, key: str):
        if key in self.fail_reads:
            raise StorageException("read denied", key=key)
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if key in self.fail_writes:
            raise StorageException("quota exceeded", key=key)
        self.set_calls.append(key)
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass
class FakeClock:
    now: int = T0

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
