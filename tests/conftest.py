"""Test fixtures for the Semantic Spacetime engine.

This module provides:
- An in-memory record store provisioned with the node kinds used across the
  tests ("Node", "Person", "Country", "Hub", "Fragment") and the four edge
  partitions
- Association registries, node stores and link stores bound to that store
- A ready `Spacetime` session over the same store
- `FailingRecordStore`, a store whose every call raises, for error wrapping
- `WriteFailingRecordStore`, an in-memory store whose writes raise
"""

from typing import Sequence

import pytest

from sstgraph.association import AssociationRegistry, EdgePartition
from sstgraph.events import EventChain
from sstgraph.links import LinkStore
from sstgraph.nodes import NodeStore
from sstgraph.session import Spacetime
from sstgraph.storage.interfaces import Record, RecordStoreInterface
from sstgraph.storage.memory import InMemoryRecordStore

NODE_KINDS = ("Node", "Person", "Country", "Hub", "Fragment")


class FailingRecordStore(RecordStoreInterface):
    """Record store whose every operation fails like an unreachable server."""

    def __init__(self, partitions: Sequence[str]) -> None:
        self._names = list(partitions)

    async def exists(self, partition: str, key: str) -> bool:
        raise ConnectionError("store unavailable")

    async def get(self, partition: str, key: str) -> Record | None:
        raise ConnectionError("store unavailable")

    async def put(self, partition: str, key: str, record: Record) -> None:
        raise ConnectionError("store unavailable")

    async def replace(self, partition: str, key: str, record: Record) -> None:
        raise ConnectionError("store unavailable")

    async def delete(self, partition: str, key: str) -> bool:
        raise ConnectionError("store unavailable")

    def partitions(self) -> Sequence[str]:
        return self._names


class WriteFailingRecordStore(InMemoryRecordStore):
    """In-memory store whose writes fail while reads keep working.

    Args:
        fail_on: Names of the write methods that raise (`"put"`, `"replace"`).
    """

    def __init__(self, partitions: Sequence[str], fail_on: Sequence[str] = ("put", "replace")) -> None:
        super().__init__(partitions)
        self.fail_on = set(fail_on)

    async def put(self, partition: str, key: str, record: Record) -> None:
        if "put" in self.fail_on:
            raise ConnectionError("write rejected")
        await super().put(partition, key, record)

    async def replace(self, partition: str, key: str, record: Record) -> None:
        if "replace" in self.fail_on:
            raise ConnectionError("write rejected")
        await super().replace(partition, key, record)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    """Empty in-memory store with the test node kinds and all edge partitions."""
    return InMemoryRecordStore([*NODE_KINDS, *(p.value for p in EdgePartition)])


@pytest.fixture
def failing_store() -> FailingRecordStore:
    return FailingRecordStore([*NODE_KINDS, *(p.value for p in EdgePartition)])


@pytest.fixture
def registry() -> AssociationRegistry:
    """Registry seeded with the default associations."""
    return AssociationRegistry()


@pytest.fixture
def node_store(record_store: InMemoryRecordStore) -> NodeStore:
    return NodeStore(record_store, NODE_KINDS)


@pytest.fixture
def link_store(record_store: InMemoryRecordStore, registry: AssociationRegistry) -> LinkStore:
    return LinkStore(record_store, registry)


@pytest.fixture
def event_chain(node_store: NodeStore, link_store: LinkStore) -> EventChain:
    return EventChain(node_store, link_store)


@pytest.fixture
def spacetime(record_store: InMemoryRecordStore) -> Spacetime:
    """Session over the shared in-memory store with default associations."""
    return Spacetime(record_store, NODE_KINDS)
