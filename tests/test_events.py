"""Tests for event chains.

This module verifies:
- The first event after the start sentinel gets no predecessor link
- Successive single events are threaded with "then" links
- Parallel batches fan out from and fan in to every node of adjacent batches
- The functional core threads explicit state and keeps chains independent
- Failure part way through a batch keeps earlier writes and the old cursor
"""

import pytest

from sstgraph.errors import UnknownPartitionError
from sstgraph.events import EventChain, EventSpec, advance
from sstgraph.keys import link_key
from sstgraph.links import LinkStore
from sstgraph.node import START_EVENT
from sstgraph.nodes import NodeStore
from sstgraph.storage.memory import InMemoryRecordStore


def then_key(from_id: str, to_id: str) -> str:
    return link_key(from_id, "then", to_id)


class TestEventChain:
    """Tests for the stateful EventChain adapter."""

    async def test_starts_at_sentinel(self, event_chain: EventChain) -> None:
        assert event_chain.previous_event == START_EVENT
        assert event_chain.previous_events == [START_EVENT]

    async def test_first_event_has_no_predecessor(
        self, event_chain: EventChain, record_store: InMemoryRecordStore
    ) -> None:
        event = await event_chain.next_event("Node", "UK grants passport", {"description": "granted"})

        assert event.weight == 1.0
        assert event.data == {"description": "granted"}
        assert await record_store.count("Follows") == 0
        assert event_chain.previous_event == event

    async def test_sequence_links_with_then(self, event_chain: EventChain, record_store: InMemoryRecordStore) -> None:
        first = await event_chain.next_event("Node", "first")
        second = await event_chain.next_event("Node", "second")
        third = await event_chain.next_event("Node", "third")

        assert await record_store.count("Follows") == 2
        link = await record_store.get("Follows", then_key(first.node_id, second.node_id))
        assert link["weight"] == 1.0
        assert link["semantics"] == "then"
        assert await record_store.exists("Follows", then_key(second.node_id, third.node_id))
        assert not await record_store.exists("Follows", then_key(first.node_id, third.node_id))

    async def test_parallel_fan_out_and_in(self, event_chain: EventChain, record_store: InMemoryRecordStore) -> None:
        """Every node of one batch links to every node of the next."""
        start = await event_chain.next_event("Node", "start of day")
        parallel = await event_chain.next_events(
            [EventSpec(kind="Node", key="coffee"), EventSpec(kind="Node", key="news")]
        )
        end = await event_chain.next_event("Node", "commute")

        assert len(parallel) == 2
        assert event_chain.previous_events == [end]
        assert await record_store.count("Follows") == 4
        for node in parallel:
            assert await record_store.exists("Follows", then_key(start.node_id, node.node_id))
            assert await record_store.exists("Follows", then_key(node.node_id, end.node_id))

    async def test_cross_product(self, event_chain: EventChain, record_store: InMemoryRecordStore) -> None:
        await event_chain.next_events([EventSpec(kind="Node", key=k) for k in ("a", "b")])
        await event_chain.next_events([EventSpec(kind="Node", key=k) for k in ("c", "d", "e")])
        assert await record_store.count("Follows") == 6

    async def test_repeat_event_is_idempotent(self, event_chain: EventChain, record_store: InMemoryRecordStore) -> None:
        """Recording the same step twice converges on the same records."""
        await event_chain.next_event("Node", "a")
        await event_chain.next_event("Node", "b")
        event_chain.reset()
        await event_chain.next_event("Node", "a")
        await event_chain.next_event("Node", "b")
        assert await record_store.count("Node") == 2
        assert await record_store.count("Follows") == 1

    async def test_reset(self, event_chain: EventChain, record_store: InMemoryRecordStore) -> None:
        await event_chain.next_event("Node", "a")
        event_chain.reset()
        await event_chain.next_event("Node", "b")
        assert await record_store.count("Follows") == 0

    async def test_empty_batch_keeps_cursor(self, event_chain: EventChain) -> None:
        first = await event_chain.next_event("Node", "a")
        assert await event_chain.next_events([]) == []
        assert event_chain.previous_event == first

    async def test_failure_keeps_earlier_writes_and_cursor(
        self, event_chain: EventChain, record_store: InMemoryRecordStore
    ) -> None:
        """A mid-batch failure is not rolled back and does not advance the cursor."""
        first = await event_chain.next_event("Node", "a")
        with pytest.raises(UnknownPartitionError):
            await event_chain.next_events([EventSpec(kind="Node", key="b"), EventSpec(kind="Planet", key="c")])

        assert await record_store.exists("Node", "b")
        assert await record_store.exists("Follows", then_key(first.node_id, "Node/b"))
        assert event_chain.previous_events == [first]


class TestAdvance:
    """Tests for the explicit-state functional core."""

    async def test_threads_state(
        self, node_store: NodeStore, link_store: LinkStore, record_store: InMemoryRecordStore
    ) -> None:
        batch = await advance(node_store, link_store, [START_EVENT], [EventSpec(kind="Node", key="a")])
        batch = await advance(node_store, link_store, batch, [EventSpec(kind="Node", key="b")])

        assert [n.key for n in batch] == ["b"]
        assert await record_store.exists("Follows", then_key("Node/a", "Node/b"))

    async def test_empty_previous_is_start(
        self, node_store: NodeStore, link_store: LinkStore, record_store: InMemoryRecordStore
    ) -> None:
        await advance(node_store, link_store, [], [EventSpec(kind="Node", key="a")])
        assert await record_store.count("Follows") == 0

    async def test_independent_chains(
        self, node_store: NodeStore, link_store: LinkStore, record_store: InMemoryRecordStore
    ) -> None:
        """Two chains interleaved through advance never link to each other."""
        chain_a = await advance(node_store, link_store, [START_EVENT], [EventSpec(kind="Node", key="a1")])
        chain_b = await advance(node_store, link_store, [START_EVENT], [EventSpec(kind="Node", key="b1")])
        await advance(node_store, link_store, chain_a, [EventSpec(kind="Node", key="a2")])
        await advance(node_store, link_store, chain_b, [EventSpec(kind="Node", key="b2")])

        assert await record_store.count("Follows") == 2
        assert not await record_store.exists("Follows", then_key("Node/b1", "Node/a2"))
