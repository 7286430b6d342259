"""Event chains: sequences of node batches threaded by "then" links.

Each step of a chain upserts a batch of event nodes and links every node of
the previous batch to every node of the new batch with the `then`
association. A batch of one gives a plain sequence; larger batches give
fan-out and fan-in, i.e. a partial order of events.

The functional core, `advance`, takes the previous batch explicitly and
returns the new one, so independent chains never share state. `EventChain`
is an optional stateful adapter that keeps the cursor for the caller.

Failures are not rolled back: if an upsert or link fails part way through a
batch, the records written before the failure stay committed and the cursor
is left where it was.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from pydantic import BaseModel, Field

from sstgraph.links import LinkStore
from sstgraph.logging import setup_logging
from sstgraph.node import START_EVENT, Node
from sstgraph.nodes import NodeStore

logger = setup_logging()

THEN = "then"
EVENT_WEIGHT = 1.0


class EventSpec(BaseModel):
    """Description of one event node to record."""

    model_config = {"frozen": True}

    kind: str = Field(description="Declared node kind to store the event in.")
    key: str = Field(description="Raw label of the event; sanitized on upsert.")
    data: Any = Field(default=None, description="Opaque payload describing the event.")


def _is_start(previous: Sequence[Node]) -> bool:
    return len(previous) == 0 or all(node == START_EVENT for node in previous)


async def advance(
    nodes: NodeStore,
    links: LinkStore,
    previous: Sequence[Node],
    specs: Sequence[EventSpec],
) -> list[Node]:
    """Record a batch of events after `previous`.

    Args:
        nodes: Node store the events are written to.
        links: Link store the `then` links are written to.
        previous: The batch returned by the previous call, or `[START_EVENT]`
            (or an empty sequence) to begin a chain.
        specs: The events to record, in order.

    Returns:
        The upserted event nodes; pass them as `previous` to the next call.
    """
    batch: list[Node] = []
    link_previous = not _is_start(previous)
    for spec in specs:
        event = await nodes.upsert(spec.kind, spec.key, spec.data, EVENT_WEIGHT)
        if link_previous:
            for prior in previous:
                await links.create_link(prior, THEN, event, weight=EVENT_WEIGHT)
        batch.append(event)
    logger.debug(f"Recorded {len(batch)} event(s) after {len(previous)} previous")
    return batch


class EventChain:
    """Stateful cursor over `advance` for a single chain of events.

    Calls are serialized by an internal lock, so concurrent tasks recording
    into the same chain observe a consistent cursor. Independent chains
    should use separate instances, or call `advance` directly.
    """

    def __init__(self, nodes: NodeStore, links: LinkStore) -> None:
        self._nodes = nodes
        self._links = links
        self._previous: list[Node] = [START_EVENT]
        self._lock = asyncio.Lock()

    @property
    def previous_events(self) -> list[Node]:
        return list(self._previous)

    @property
    def previous_event(self) -> Node:
        """The last node of the most recent batch (START_EVENT before any event)."""
        return self._previous[-1]

    def reset(self) -> None:
        """Start a new chain; the next event gets no predecessor link."""
        self._previous = [START_EVENT]

    async def next_events(self, specs: Sequence[EventSpec]) -> list[Node]:
        """Record a batch of parallel events following the previous batch.

        An empty batch records nothing and leaves the cursor unchanged.
        """
        async with self._lock:
            batch = await advance(self._nodes, self._links, self._previous, specs)
            if batch:
                self._previous = batch
            return batch

    async def next_event(self, kind: str, key: str, data: Any = None) -> Node:
        """Record a single event following the previous batch."""
        batch = await self.next_events([EventSpec(kind=kind, key=key, data=data)])
        return batch[0]
