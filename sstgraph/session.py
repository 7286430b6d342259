"""Session facade tying the engine components together.

A `Spacetime` session owns one association registry, one node store, one
link store and one event chain, all bound to the record store returned by
the provisioner. Sessions never share registry state: each starts from its
own copy of the default associations or from the table in its settings.

Example:
    ```python
    settings = SpacetimeSettings(name="nation_spacetime", node_kinds=["Node", "Hub"])
    st = await Spacetime.open(settings, provisioner=InMemoryProvisioner())

    paris = await st.create_node("Hub", "Paris", {"description": "capital of France"}, 1.0)
    france = await st.create_node("Hub", "France", {"description": "country in Europe"}, 100.0)
    await st.create_link(paris, "part_of", france, weight=100.0)
    ```
"""

from __future__ import annotations

from typing import Any, Sequence

from sstgraph.association import Association, AssociationRegistry
from sstgraph.config import SpacetimeSettings
from sstgraph.events import EventChain, EventSpec
from sstgraph.link import Link
from sstgraph.links import LinkStore
from sstgraph.logging import setup_logging
from sstgraph.node import Node, PayloadComparator, payload_equal
from sstgraph.nodes import NodeStore
from sstgraph.storage.interfaces import ProvisionerInterface, RecordStoreInterface

logger = setup_logging()


class Spacetime:
    """One open Semantic Spacetime session."""

    def __init__(
        self,
        store: RecordStoreInterface,
        node_kinds: Sequence[str],
        associations: AssociationRegistry | None = None,
        comparator: PayloadComparator = payload_equal,
        name: str = "semantic_spacetime",
    ) -> None:
        self.name = name
        self.store = store
        self.associations = associations if associations is not None else AssociationRegistry()
        self.nodes = NodeStore(store, node_kinds, comparator)
        self.links = LinkStore(store, self.associations, comparator)
        self.events = EventChain(self.nodes, self.links)

    @classmethod
    async def open(
        cls,
        settings: SpacetimeSettings | None = None,
        provisioner: ProvisionerInterface | None = None,
        comparator: PayloadComparator = payload_equal,
    ) -> "Spacetime":
        """Provision the session's partitions and return a ready session.

        Args:
            settings: Session settings; read from the environment when omitted.
            provisioner: Creates or locates the partitions. Defaults to an
                ArangoDB provisioner for `settings.url`.
            comparator: Payload equality used for change detection.
        """
        settings = settings if settings is not None else SpacetimeSettings()
        setup_logging("sstgraph", settings.log_level)
        if provisioner is None:
            from sstgraph.storage.arango import ArangoProvisioner

            provisioner = ArangoProvisioner(settings.url, settings.username, settings.password)
        store = await provisioner.provision(settings.name, settings.node_kinds)
        registry = AssociationRegistry(settings.associations)
        logger.info(f"Opened session {settings.name!r} with node kinds {settings.node_kinds}")
        return cls(store, settings.node_kinds, registry, comparator, name=settings.name)

    def create_association(self, association: Association) -> Association:
        return self.associations.register(association)

    async def create_node(self, kind: str, key: str, data: Any = None, weight: float = 0.0) -> Node:
        return await self.nodes.upsert(kind, key, data, weight)

    async def get_node_data(self, ref: str) -> Any:
        return await self.nodes.get_data(ref)

    async def create_link(
        self, from_node: Node, relation: str, to_node: Node, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        return await self.links.create_link(from_node, relation, to_node, data, weight)

    async def create_link_by_id(
        self, from_id: str, relation: str, to_id: str, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        return await self.links.create_link_by_id(from_id, relation, to_id, data, weight)

    async def block_link(
        self, from_node: Node, relation: str, to_node: Node, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        return await self.links.block_link(from_node, relation, to_node, data, weight)

    async def block_link_by_id(
        self, from_id: str, relation: str, to_id: str, data: Any = None, weight: float = 1.0
    ) -> Link | None:
        return await self.links.block_link_by_id(from_id, relation, to_id, data, weight)

    async def increment_link(self, from_node: Node, relation: str, to_node: Node, data: Any = None) -> Link:
        return await self.links.increment_link(from_node, relation, to_node, data)

    async def delete_link(self, from_node: Node, relation: str, to_node: Node, negate: bool = False) -> bool:
        return await self.links.delete_link(from_node, relation, to_node, negate)

    def link_id(self, link: Link | None) -> str:
        return self.links.resolve_id(link)

    async def next_event(self, kind: str, key: str, data: Any = None) -> Node:
        return await self.events.next_event(kind, key, data)

    async def next_events(self, specs: Sequence[EventSpec]) -> list[Node]:
        return await self.events.next_events(specs)

    @property
    def previous_event(self) -> Node:
        return self.events.previous_event
