"""ArangoDB record store and provisioner.

Node kinds map to vertex collections and the four edge partitions map to
edge collections of one named graph (`semantic_spacetime`). The provisioner
creates the database, graph and collections on first use and reopens them
afterwards.

python-arango is a blocking driver, so every call is run in a worker thread
with `asyncio.to_thread`. Driver exceptions propagate unchanged; the engine
wraps them in `StoreError` with the attempted operation and key.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from arango import ArangoClient
from arango.collection import StandardCollection
from arango.database import StandardDatabase

from sstgraph.association import EdgePartition
from sstgraph.logging import setup_logging
from sstgraph.storage.interfaces import ProvisionerInterface, Record, RecordStoreInterface

logger = setup_logging()

GRAPH_NAME = "semantic_spacetime"
ORPHAN_COLLECTION = "Disconnected"
EDGE_PARTITIONS = tuple(p.value for p in EdgePartition)


class ArangoRecordStore(RecordStoreInterface):
    """Record store over named ArangoDB collections.

    Args:
        collections: Mapping of partition name to collection handle.
    """

    def __init__(self, collections: dict[str, StandardCollection]) -> None:
        self._collections = dict(collections)

    def _collection(self, partition: str) -> StandardCollection:
        try:
            return self._collections[partition]
        except KeyError as e:
            raise KeyError(f"No collection for partition {partition!r}") from e

    async def exists(self, partition: str, key: str) -> bool:
        return await asyncio.to_thread(self._collection(partition).has, key)

    async def get(self, partition: str, key: str) -> Record | None:
        return await asyncio.to_thread(self._collection(partition).get, key)

    async def put(self, partition: str, key: str, record: Record) -> None:
        await asyncio.to_thread(self._collection(partition).insert, {**record, "_key": key})

    async def replace(self, partition: str, key: str, record: Record) -> None:
        await asyncio.to_thread(self._collection(partition).replace, {**record, "_key": key})

    async def delete(self, partition: str, key: str) -> bool:
        removed = await asyncio.to_thread(self._collection(partition).delete, key, ignore_missing=True)
        return bool(removed)

    def partitions(self) -> Sequence[str]:
        return list(self._collections)


class ArangoProvisioner(ProvisionerInterface):
    """Creates or opens the database, graph and collections for a session."""

    def __init__(self, url: str = "http://localhost:8529", username: str = "root", password: str = "") -> None:
        self.url = url
        self.username = username
        self.password = password
        self._client: ArangoClient | None = None

    async def provision(self, session_name: str, node_kinds: Sequence[str]) -> ArangoRecordStore:
        return await asyncio.to_thread(self._provision, session_name, list(node_kinds))

    def _provision(self, session_name: str, node_kinds: list[str]) -> ArangoRecordStore:
        if self._client is None:
            self._client = ArangoClient(hosts=self.url)
        sys_db = self._client.db("_system", username=self.username, password=self.password)
        if not sys_db.has_database(session_name):
            sys_db.create_database(session_name)
            logger.info(f"Created database {session_name!r}")
        db = self._client.db(session_name, username=self.username, password=self.password)
        self._ensure_graph(db, node_kinds)
        collections = {name: db.collection(name) for name in [*node_kinds, *EDGE_PARTITIONS]}
        logger.info(f"Connected to ArangoDB at {self.url}, database {session_name!r}")
        return ArangoRecordStore(collections)

    def _ensure_graph(self, db: StandardDatabase, node_kinds: list[str]) -> None:
        if not db.has_graph(GRAPH_NAME):
            db.create_graph(
                GRAPH_NAME,
                edge_definitions=[_edge_definition(p, node_kinds) for p in EDGE_PARTITIONS],
                orphan_collections=[ORPHAN_COLLECTION],
            )
            logger.info(f"Created graph {GRAPH_NAME!r}")
            return

        graph = db.graph(GRAPH_NAME)
        for kind in node_kinds:
            if not graph.has_vertex_collection(kind):
                graph.create_vertex_collection(kind)
        existing = {d["edge_collection"]: d for d in graph.edge_definitions()}
        for partition in EDGE_PARTITIONS:
            definition = existing.get(partition)
            if definition is None:
                graph.create_edge_definition(**_edge_definition(partition, node_kinds))
                continue
            kinds = _merge(definition["from_vertex_collections"], node_kinds)
            if kinds != list(definition["from_vertex_collections"]):
                graph.replace_edge_definition(**_edge_definition(partition, kinds))

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def _edge_definition(partition: str, node_kinds: list[str]) -> dict[str, Any]:
    return {
        "edge_collection": partition,
        "from_vertex_collections": list(node_kinds),
        "to_vertex_collections": list(node_kinds),
    }


def _merge(current: Sequence[str], extra: Sequence[str]) -> list[str]:
    merged = list(current)
    merged.extend(k for k in extra if k not in merged)
    return merged
