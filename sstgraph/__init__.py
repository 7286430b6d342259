"""Semantic Spacetime - an idempotent, typed knowledge graph engine.

Vertices and edges carry a closed taxonomy of semantic relation kinds
(Near, Follows, Contains, Expresses). Repeating a mutation with the same
semantic inputs converges on one stored record instead of duplicating it.

The ArangoDB backend is imported lazily so the in-memory store can be used
without python-arango installed:

    # This does NOT import arango:
    from sstgraph import Spacetime, InMemoryProvisioner

    # This does (when the symbol is accessed):
    from sstgraph import ArangoProvisioner
"""

from typing import TYPE_CHECKING

from sstgraph.association import (
    DEFAULT_ASSOCIATIONS,
    Association,
    AssociationRegistry,
    EdgePartition,
    SemanticType,
    label,
    partition_for,
)
from sstgraph.config import SpacetimeSettings
from sstgraph.errors import (
    AssociationConflictError,
    InvalidReferenceError,
    NilReferenceError,
    RecordNotFoundError,
    SpacetimeError,
    StoreError,
    UnknownAssociationError,
    UnknownPartitionError,
)
from sstgraph.events import EventChain, EventSpec, advance
from sstgraph.keys import link_key, node_ref, sanitize
from sstgraph.link import Link
from sstgraph.links import LinkStore, increment_link_op, upsert_link_op
from sstgraph.node import START_EVENT, Node, payload_equal
from sstgraph.nodes import NodeStore, node_id
from sstgraph.session import Spacetime
from sstgraph.storage import InMemoryProvisioner, InMemoryRecordStore, ProvisionerInterface, RecordStoreInterface

if TYPE_CHECKING:
    from sstgraph.storage.arango import ArangoProvisioner, ArangoRecordStore

__all__ = [
    "Association",
    "AssociationRegistry",
    "DEFAULT_ASSOCIATIONS",
    "EdgePartition",
    "SemanticType",
    "label",
    "partition_for",
    "SpacetimeSettings",
    "SpacetimeError",
    "AssociationConflictError",
    "UnknownAssociationError",
    "UnknownPartitionError",
    "InvalidReferenceError",
    "NilReferenceError",
    "RecordNotFoundError",
    "StoreError",
    "EventChain",
    "EventSpec",
    "advance",
    "sanitize",
    "node_ref",
    "link_key",
    "Link",
    "LinkStore",
    "upsert_link_op",
    "increment_link_op",
    "Node",
    "START_EVENT",
    "payload_equal",
    "NodeStore",
    "node_id",
    "Spacetime",
    "RecordStoreInterface",
    "ProvisionerInterface",
    "InMemoryRecordStore",
    "InMemoryProvisioner",
    "ArangoProvisioner",
    "ArangoRecordStore",
]

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import for the ArangoDB backend."""
    if name in ("ArangoProvisioner", "ArangoRecordStore"):
        from sstgraph.storage.arango import ArangoProvisioner, ArangoRecordStore
        return {"ArangoProvisioner": ArangoProvisioner, "ArangoRecordStore": ArangoRecordStore}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
