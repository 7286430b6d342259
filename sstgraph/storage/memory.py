"""In-memory record store for testing and development.

This module provides a dictionary-based implementation of the record store
interface that keeps all data in memory. It is suitable for:

- **Unit testing**: Fast, isolated tests without an ArangoDB server
- **Development**: Quick iteration without database setup
- **Small datasets**: Demos and examples with limited data

**Not recommended for production** due to:
- No persistence (data is lost when the process exits)
- No concurrency control beyond a single event loop
- Memory constraints (all data must fit in RAM)

For production use, see `sstgraph.storage.arango`.
"""

import copy
from typing import Sequence

from sstgraph.association import EdgePartition
from sstgraph.storage.interfaces import ProvisionerInterface, Record, RecordStoreInterface


class InMemoryRecordStore(RecordStoreInterface):
    """In-memory record store using one dictionary per partition.

    Records are deep-copied on the way in and on the way out, so callers can
    never mutate stored state by accident. Every operation is O(1).

    Thread safety: Not thread-safe. Within one asyncio event loop each call
    runs to completion without yielding, so single calls do not interleave.

    Example:
        ```python
        store = InMemoryRecordStore(["Node", "Near"])
        await store.put("Node", "n1", {"_key": "n1", "weight": 1.0})
        record = await store.get("Node", "n1")
        ```
    """

    def __init__(self, partitions: Sequence[str] = ()) -> None:
        """Initialize a store serving the given partitions, all empty."""
        self._partitions: dict[str, dict[str, Record]] = {name: {} for name in partitions}

    def _partition(self, partition: str) -> dict[str, Record]:
        try:
            return self._partitions[partition]
        except KeyError as e:
            raise KeyError(f"No partition {partition!r} in this store") from e

    async def exists(self, partition: str, key: str) -> bool:
        """Checks whether a record exists.

        Args:
            partition: The partition to look in.
            key: The record key.

        Returns:
            `True` if the record exists, otherwise `False`.
        """
        return key in self._partition(partition)

    async def get(self, partition: str, key: str) -> Record | None:
        """Retrieves a copy of a record by its key.

        Args:
            partition: The partition to look in.
            key: The record key.

        Returns:
            The record if found, otherwise `None`.
        """
        record = self._partition(partition).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, partition: str, key: str, record: Record) -> None:
        """Creates a new record.

        Args:
            partition: The partition to write to.
            key: The record key.
            record: The record body.

        Raises:
            KeyError: If a record with the key already exists.
        """
        records = self._partition(partition)
        if key in records:
            raise KeyError(f"Record {partition}/{key} already exists")
        records[key] = copy.deepcopy(record)

    async def replace(self, partition: str, key: str, record: Record) -> None:
        """Overwrites an existing record.

        Raises:
            KeyError: If no record with the key exists.
        """
        records = self._partition(partition)
        if key not in records:
            raise KeyError(f"Record {partition}/{key} does not exist")
        records[key] = copy.deepcopy(record)

    async def delete(self, partition: str, key: str) -> bool:
        """Deletes a record by its key.

        Returns:
            `True` if the record was found and deleted, `False` otherwise.
        """
        records = self._partition(partition)
        if key in records:
            del records[key]
            return True
        return False

    def partitions(self) -> Sequence[str]:
        return list(self._partitions)

    def add_partition(self, partition: str) -> None:
        """Creates an empty partition if it does not exist yet."""
        self._partitions.setdefault(partition, {})

    async def count(self, partition: str) -> int:
        """Returns the number of records in a partition."""
        return len(self._partition(partition))

    async def list_all(self, partition: str, limit: int = 1000, offset: int = 0) -> list[Record]:
        """Lists copies of the records in a partition, with pagination.

        Args:
            partition: The partition to list.
            limit: The maximum number of records to return.
            offset: The starting offset for pagination.

        Returns:
            A list of records in insertion order.
        """
        records = list(self._partition(partition).values())
        return copy.deepcopy(records[offset : offset + limit])


class InMemoryProvisioner(ProvisionerInterface):
    """Provisions in-memory stores, one per session name.

    Provisioning the same session twice returns the same store, extended with
    any node kinds it did not have yet, which mirrors reopening an existing
    database.
    """

    def __init__(self) -> None:
        self._stores: dict[str, InMemoryRecordStore] = {}

    async def provision(self, session_name: str, node_kinds: Sequence[str]) -> InMemoryRecordStore:
        store = self._stores.get(session_name)
        if store is None:
            store = InMemoryRecordStore()
            self._stores[session_name] = store
        for name in [*node_kinds, *(p.value for p in EdgePartition)]:
            store.add_partition(name)
        return store
