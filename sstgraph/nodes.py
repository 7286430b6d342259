"""Idempotent creation and update of graph vertices.

`NodeStore.upsert` is the only way vertices are written. Repeating an upsert
with the same arguments converges on one stored record:

1. The kind must be one of the node partitions declared for the session.
2. The caller's key is sanitized exactly once.
3. A missing record is inserted as given.
4. An upsert carrying no data and zero weight is an existence probe: an
   existing record is never touched by it, so placeholders such as
   `upsert("Hub", "France")` cannot wipe out real content.
5. Otherwise the stored record is replaced in full when its data or weight
   differs from the incoming values, and left alone when they match.

Each upsert performs at most one read and at most one write against the
record store.
"""

from __future__ import annotations

from typing import Any, Iterable

from sstgraph.association import EdgePartition
from sstgraph.errors import (
    InvalidReferenceError,
    NilReferenceError,
    RecordNotFoundError,
    UnknownPartitionError,
    store_operation,
)
from sstgraph.keys import sanitize, split_node_ref
from sstgraph.logging import setup_logging
from sstgraph.node import Node, PayloadComparator, payload_equal, payload_is_empty
from sstgraph.storage.interfaces import RecordStoreInterface

logger = setup_logging()


class NodeStore:
    """Vertex operations over a record store.

    Args:
        store: Record store serving one partition per declared node kind.
        kinds: The node kinds (partitions) callers may use.
        comparator: Decides whether stored and incoming payloads are equal.

    Raises:
        ValueError: If a kind reuses one of the four edge partition names.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        kinds: Iterable[str],
        comparator: PayloadComparator = payload_equal,
    ) -> None:
        self._store = store
        self._kinds = frozenset(kinds)
        self._comparator = comparator
        reserved = self._kinds.intersection(p.value for p in EdgePartition)
        if reserved:
            raise ValueError(f"Node kinds may not reuse edge partition names: {sorted(reserved)}")

    @property
    def kinds(self) -> frozenset[str]:
        return self._kinds

    def _check_kind(self, kind: str) -> None:
        if kind not in self._kinds:
            raise UnknownPartitionError(f"sst: no node collection for kind: {kind}")

    async def upsert(self, kind: str, raw_key: str, data: Any = None, weight: float = 0.0) -> Node:
        """Idempotently create or update a node of the given kind.

        Args:
            kind: A declared node kind.
            raw_key: The caller's label for the node; sanitized here.
            data: Opaque payload. None or empty together with zero weight
                makes the call an existence probe.
            weight: Importance rank.

        Returns:
            The stored node after the call: the new node, the replacement,
            or the untouched existing node for a probe or unchanged upsert.

        Raises:
            UnknownPartitionError: If `kind` was not declared.
            StoreError: If the record store fails.
        """
        self._check_kind(kind)
        node = Node(key=sanitize(raw_key), kind=kind, data=data, weight=weight)

        with store_operation("read node", kind, node.key):
            record = await self._store.get(kind, node.key)

        if record is None:
            with store_operation("create node", kind, node.key):
                await self._store.put(kind, node.key, node.to_record())
            logger.debug(f"Created node {node.node_id}")
            return node

        existing = Node.from_record(kind, record)
        if payload_is_empty(data) and weight == 0.0:
            return existing
        if existing.weight == node.weight and self._comparator(existing.data, node.data):
            return existing

        with store_operation("update node", kind, node.key):
            await self._store.replace(kind, node.key, node.to_record())
        logger.debug(f"Updated node {node.node_id}")
        return node

    async def get(self, kind: str, raw_key: str) -> Node | None:
        """Return the stored node, or None if it does not exist."""
        self._check_kind(kind)
        key = sanitize(raw_key)
        with store_operation("read node", kind, key):
            record = await self._store.get(kind, key)
        return Node.from_record(kind, record) if record is not None else None

    async def exists(self, kind: str, raw_key: str) -> bool:
        self._check_kind(kind)
        key = sanitize(raw_key)
        with store_operation("check node", kind, key):
            return await self._store.exists(kind, key)

    async def get_data(self, ref: str) -> Any:
        """Return the payload of the node with fully-qualified reference `kind/key`.

        Raises:
            InvalidReferenceError: If `ref` is not of the form `kind/key`.
            RecordNotFoundError: If no such node is stored.
        """
        try:
            kind, key = split_node_ref(ref)
        except ValueError as e:
            raise InvalidReferenceError(ref) from e
        node = await self.get(kind, key)
        if node is None:
            raise RecordNotFoundError(kind, sanitize(key))
        return node.data


def node_id(node: Node | None) -> str:
    """Return the `kind/key` reference of a node.

    Raises:
        NilReferenceError: If `node` is None.
    """
    if node is None:
        raise NilReferenceError("sst: node is nil")
    return node.node_id
