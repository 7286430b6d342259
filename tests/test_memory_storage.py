"""Tests for the in-memory record store and provisioner."""

import pytest

from sstgraph.storage.memory import InMemoryProvisioner, InMemoryRecordStore


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore(["Node", "Near"])


class TestInMemoryRecordStore:
    """Tests for InMemoryRecordStore CRUD semantics."""

    async def test_put_and_get(self, store: InMemoryRecordStore) -> None:
        await store.put("Node", "n1", {"_key": "n1", "weight": 1.0})
        assert await store.get("Node", "n1") == {"_key": "n1", "weight": 1.0}
        assert await store.exists("Node", "n1")

    async def test_get_missing(self, store: InMemoryRecordStore) -> None:
        assert await store.get("Node", "missing") is None
        assert not await store.exists("Node", "missing")

    async def test_put_existing_fails(self, store: InMemoryRecordStore) -> None:
        await store.put("Node", "n1", {"_key": "n1"})
        with pytest.raises(KeyError):
            await store.put("Node", "n1", {"_key": "n1"})

    async def test_replace(self, store: InMemoryRecordStore) -> None:
        await store.put("Node", "n1", {"_key": "n1", "data": {"a": 1}})
        await store.replace("Node", "n1", {"_key": "n1", "data": {"b": 2}})
        assert await store.get("Node", "n1") == {"_key": "n1", "data": {"b": 2}}

    async def test_replace_missing_fails(self, store: InMemoryRecordStore) -> None:
        with pytest.raises(KeyError):
            await store.replace("Node", "n1", {"_key": "n1"})

    async def test_delete(self, store: InMemoryRecordStore) -> None:
        await store.put("Near", "l1", {"_key": "l1"})
        assert await store.delete("Near", "l1")
        assert not await store.delete("Near", "l1")
        assert await store.count("Near") == 0

    async def test_unknown_partition(self, store: InMemoryRecordStore) -> None:
        with pytest.raises(KeyError):
            await store.get("Planet", "mars")

    async def test_copies_isolate_state(self, store: InMemoryRecordStore) -> None:
        """Mutating a record before or after storage never changes the stored copy."""
        record = {"_key": "n1", "data": {"tags": ["a"]}}
        await store.put("Node", "n1", record)
        record["data"]["tags"].append("b")

        fetched = await store.get("Node", "n1")
        fetched["data"]["tags"].append("c")

        assert (await store.get("Node", "n1"))["data"] == {"tags": ["a"]}

    async def test_list_all_paginates(self, store: InMemoryRecordStore) -> None:
        for i in range(5):
            await store.put("Node", f"n{i}", {"_key": f"n{i}"})
        page = await store.list_all("Node", limit=2, offset=1)
        assert [r["_key"] for r in page] == ["n1", "n2"]

    def test_add_partition(self, store: InMemoryRecordStore) -> None:
        store.add_partition("Hub")
        store.add_partition("Hub")
        assert list(store.partitions()) == ["Node", "Near", "Hub"]


class TestInMemoryProvisioner:
    """Tests for InMemoryProvisioner."""

    async def test_provisions_node_and_edge_partitions(self) -> None:
        store = await InMemoryProvisioner().provision("s", ["Node", "Hub"])
        assert list(store.partitions()) == ["Node", "Hub", "Near", "Follows", "Contains", "Expresses"]

    async def test_reprovision_extends_same_store(self) -> None:
        """Reopening a session keeps its data and adds new kinds."""
        provisioner = InMemoryProvisioner()
        first = await provisioner.provision("s", ["Node"])
        await first.put("Node", "n1", {"_key": "n1"})

        second = await provisioner.provision("s", ["Node", "Hub"])

        assert second is first
        assert "Hub" in second.partitions()
        assert await second.exists("Node", "n1")

    async def test_sessions_are_separate(self) -> None:
        provisioner = InMemoryProvisioner()
        a = await provisioner.provision("a", ["Node"])
        b = await provisioner.provision("b", ["Node"])
        await a.put("Node", "n1", {"_key": "n1"})
        assert not await b.exists("Node", "n1")
