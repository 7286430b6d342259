"""Idempotent creation, update, negation and deletion of graph edges.

Every link operation goes through `LinkStore.apply_link_op`:

1. The relation name is resolved through the session's association registry.
2. The association's semantic type picks one of the four edge partitions
   (by magnitude; the sign only changes the reading).
3. The storage key is derived from `(polarity, from_id, relation, to_id)`.
4. The stored record, if any, and the candidate link are handed to a *link
   op*, a plain function `op(existing, candidate) -> (link, is_noop)`.
5. A no-op returns the existing record (or None if there is none) without
   writing; otherwise the op's result is created or replaced.

Two ops are provided:

- `upsert_link_op` (create and block): a negative candidate weight is never
  written, not even for a brand-new link; a candidate with the same weight
  and data as the stored link is a no-op; anything else replaces the record.
- `increment_link_op`: never a no-op. The weight becomes the stored weight
  plus 1.0 (1.0 for a new link) and the data is replaced by the candidate's.
  Increments always target the positive (non-negated) link; an op marked
  with `positive_only = True` is routed to the positive key whatever the
  caller passes as `negate`.

A blocked link lives under the negated key, so a link and its negation are
independent records that can coexist.

Concurrency: each operation is read-then-write with no locking or
compare-and-swap. Two callers upserting the same key concurrently may both
read the old record and both write; the last write wins. Callers needing
stronger guarantees must serialize writes to the same link themselves.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, cast

from sstgraph.association import Association, AssociationRegistry, partition_for
from sstgraph.errors import NilReferenceError, UnknownAssociationError, store_operation
from sstgraph.keys import link_key
from sstgraph.link import Link
from sstgraph.logging import setup_logging
from sstgraph.node import Node, PayloadComparator, payload_equal
from sstgraph.storage.interfaces import RecordStoreInterface

logger = setup_logging()

LinkOp = Callable[[Link | None, Link], tuple[Link | None, bool]]


def upsert_link_op(
    existing: Link | None,
    candidate: Link,
    comparator: PayloadComparator = payload_equal,
) -> tuple[Link | None, bool]:
    """Replace the stored link with the candidate unless nothing would change.

    Negative weights are rejected outright, whether or not a link exists.
    """
    if candidate.weight < 0:
        return existing, True
    if existing is not None and existing.weight == candidate.weight and comparator(existing.data, candidate.data):
        return existing, True
    return candidate, False


def increment_link_op(existing: Link | None, candidate: Link) -> tuple[Link | None, bool]:
    """Add 1.0 to the stored weight and take the candidate's data."""
    base = existing.weight if existing is not None else 0.0
    return candidate.model_copy(update={"weight": base + 1.0, "negated": False}), False


increment_link_op.positive_only = True  # type: ignore[attr-defined]


def _positive_only(op: LinkOp) -> bool:
    """True if `op`, or the function a partial wraps, always targets the positive link."""
    while isinstance(op, partial):
        op = op.func
    return getattr(op, "positive_only", False)


def _endpoint(node: Node | None) -> str:
    if node is None:
        raise NilReferenceError("sst: node is nil")
    return node.node_id


class LinkStore:
    """Edge operations over a record store, routed by association.

    Args:
        store: Record store serving the four edge partitions.
        registry: Association registry used to resolve relation names.
        comparator: Decides whether stored and incoming payloads are equal.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        registry: AssociationRegistry,
        comparator: PayloadComparator = payload_equal,
    ) -> None:
        self._store = store
        self._registry = registry
        self._comparator = comparator

    @property
    def registry(self) -> AssociationRegistry:
        return self._registry

    def _locate(self, from_id: str | None, relation: str, to_id: str | None, negate: bool) -> tuple[Association, str, str]:
        if from_id is None or to_id is None:
            raise NilReferenceError("sst: link endpoint is nil")
        association = self._registry.resolve(relation)
        partition = partition_for(association.semantic_type).value
        return association, partition, link_key(from_id, association.key, to_id, negate)

    async def apply_link_op(
        self,
        from_id: str,
        relation: str,
        to_id: str,
        data: Any,
        weight: float,
        negate: bool,
        op: LinkOp,
    ) -> Link | None:
        """Create the link or apply `op` to the existing one.

        Args:
            from_id: Reference `kind/key` of the source node.
            relation: Association name (raw or sanitized).
            to_id: Reference `kind/key` of the target node.
            data: Opaque payload for the candidate link.
            weight: Weight of the candidate link.
            negate: Target the negated (blocked) link instead of the positive one.
                Ignored for ops that always target the positive link.
            op: Decides the stored result from the existing and candidate links.

        Returns:
            The stored link after the call, or None when a no-op left no link
            stored (a rejected first create).

        Raises:
            NilReferenceError: If an endpoint is None.
            UnknownAssociationError: If the relation is not registered.
            StoreError: If the record store fails.
        """
        if _positive_only(op):
            negate = False
        association, partition, key = self._locate(from_id, relation, to_id, negate)
        candidate = Link(
            key=key,
            from_id=from_id,
            to_id=to_id,
            relation=association.key,
            data=data,
            weight=weight,
            negated=negate,
        )

        with store_operation("read link", partition, key):
            record = await self._store.get(partition, key)
        existing = Link.from_record(record) if record is not None else None

        result, noop = op(existing, candidate)
        if noop or result is None:
            logger.debug(f"No change to link {partition}/{key}")
            return existing

        if existing is None:
            with store_operation("add new link", partition, key):
                await self._store.put(partition, key, result.to_record())
            logger.debug(f"Created link {partition}/{key} ({result.weight})")
        else:
            with store_operation("update link", partition, key):
                await self._store.replace(partition, key, result.to_record())
            logger.debug(f"Updated link {partition}/{key} ({existing.weight} -> {result.weight})")
        return result

    async def create_link_by_id(
        self, from_id: str, relation: str, to_id: str, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        """Create the link, or update the existing link with new weight and data."""
        return await self.apply_link_op(
            from_id, relation, to_id, data, weight, False, partial(upsert_link_op, comparator=self._comparator)
        )

    async def create_link(
        self, from_node: Node, relation: str, to_node: Node, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        """Create the link between two nodes, or update it with new weight and data."""
        return await self.create_link_by_id(_endpoint(from_node), relation, _endpoint(to_node), data, weight)

    async def block_link_by_id(
        self, from_id: str, relation: str, to_id: str, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        """Create or update the negation of the link, leaving the positive link alone."""
        return await self.apply_link_op(
            from_id, relation, to_id, data, weight, True, partial(upsert_link_op, comparator=self._comparator)
        )

    async def block_link(
        self, from_node: Node, relation: str, to_node: Node, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        """Create or update the negation of the link between two nodes."""
        return await self.block_link_by_id(_endpoint(from_node), relation, _endpoint(to_node), data, weight)

    async def increment_link(self, from_node: Node, relation: str, to_node: Node, data: Any = None) -> Link:
        """Create the link with weight 1.0, or add 1.0 to the existing weight."""
        link = await self.apply_link_op(
            _endpoint(from_node), relation, _endpoint(to_node), data, 1.0, False, increment_link_op
        )
        return cast(Link, link)

    async def delete_link(self, from_node: Node, relation: str, to_node: Node, negate: bool = False) -> bool:
        """Delete the link if it exists.

        Deleting a missing link is not an error.

        Returns:
            True if a record was removed, False if there was nothing to delete.
        """
        _, partition, key = self._locate(_endpoint(from_node), relation, _endpoint(to_node), negate)
        with store_operation("delete link", partition, key):
            removed = await self._store.delete(partition, key)
        if removed:
            logger.debug(f"Deleted link {partition}/{key}")
        return removed

    async def get_link(self, from_node: Node, relation: str, to_node: Node, negate: bool = False) -> Link | None:
        """Return the stored link, or None if it does not exist."""
        _, partition, key = self._locate(_endpoint(from_node), relation, _endpoint(to_node), negate)
        with store_operation("read link", partition, key):
            record = await self._store.get(partition, key)
        return Link.from_record(record) if record is not None else None

    async def exists(self, from_node: Node, relation: str, to_node: Node, negate: bool = False) -> bool:
        _, partition, key = self._locate(_endpoint(from_node), relation, _endpoint(to_node), negate)
        with store_operation("check link", partition, key):
            return await self._store.exists(partition, key)

    def resolve_id(self, link: Link | None) -> str:
        """Return the store address `Partition/key` of a link.

        The partition follows from the semantic type of the link's association.

        Raises:
            NilReferenceError: If `link` is None.
            UnknownAssociationError: If the link's relation is not registered.
        """
        if link is None:
            raise NilReferenceError("sst: link is nil")
        association = self._registry.get(link.relation)
        if association is None:
            raise UnknownAssociationError(link.relation)
        return f"{partition_for(association.semantic_type).value}/{link.key}"

    def resolve_id_with(self, link: Link | None, semantic_type: int) -> str:
        """Return the store address of a link for an explicitly given semantic type."""
        if link is None:
            raise NilReferenceError("sst: link is nil")
        return f"{partition_for(semantic_type).value}/{link.key}"
