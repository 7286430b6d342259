"""Record store interfaces and implementations."""

from sstgraph.storage.interfaces import (
    ProvisionerInterface,
    Record,
    RecordStoreInterface,
)
from sstgraph.storage.memory import (
    InMemoryProvisioner,
    InMemoryRecordStore,
)

__all__ = [
    "Record",
    "RecordStoreInterface",
    "ProvisionerInterface",
    "InMemoryRecordStore",
    "InMemoryProvisioner",
]
