"""Storage interface definitions for the Semantic Spacetime engine."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

Record = dict[str, Any]


class RecordStoreInterface(ABC):
    """Abstract per-record store, partitioned by collection name.

    Partitions correspond to the declared node kinds plus the four edge
    partitions (`Near`, `Follows`, `Contains`, `Expresses`). Each method is a
    single-record operation; the engine assumes nothing about transactions
    across records. Implementations report their own failures by raising;
    the engine wraps them in `StoreError`.
    """

    @abstractmethod
    async def exists(self, partition: str, key: str) -> bool:
        """Return True if a record with this key exists in the partition."""

    @abstractmethod
    async def get(self, partition: str, key: str) -> Record | None:
        """Retrieve a record by key, or None if not found."""

    @abstractmethod
    async def put(self, partition: str, key: str, record: Record) -> None:
        """Create a new record.

        Implementations may raise if a record with the key already exists.
        """

    @abstractmethod
    async def replace(self, partition: str, key: str, record: Record) -> None:
        """Overwrite an existing record in full."""

    @abstractmethod
    async def delete(self, partition: str, key: str) -> bool:
        """Delete a record by key.

        Returns True if found and deleted, False if no such record existed.
        """

    @abstractmethod
    def partitions(self) -> Sequence[str]:
        """Return the names of the partitions this store serves."""


class ProvisionerInterface(ABC):
    """Prepares the partitions for a session and hands back a record store."""

    @abstractmethod
    async def provision(self, session_name: str, node_kinds: Sequence[str]) -> RecordStoreInterface:
        """Ensure each node partition and the four edge partitions exist.

        Returns a record store serving exactly those partitions.
        """
