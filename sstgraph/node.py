"""Vertex records of a Semantic Spacetime graph."""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, Field


PayloadComparator = Callable[[Any, Any], bool]
"""Decides whether two opaque payloads are equal for change detection."""


def payload_equal(a: Any, b: Any) -> bool:
    """Default comparator: structural equality of the two payloads."""
    return a == b


def payload_is_empty(data: Any) -> bool:
    """True for an absent payload, or an empty map, string or sequence."""
    if data is None:
        return True
    if isinstance(data, (dict, list, tuple, str, bytes)):
        return len(data) == 0
    return False


class Node(BaseModel):
    """A vertex, identified by its kind and sanitized key.

    The kind names the partition the vertex is stored in. `data` is an opaque
    payload (a JSON-style map, a string, or None) that the engine never
    inspects beyond change detection.
    """

    model_config = {"frozen": True}

    key: str = Field(description="Sanitized storage key.")
    kind: str = Field(description="Node partition this vertex lives in.")
    data: Any = Field(default=None, description="Opaque caller payload.")
    weight: float = Field(default=0.0, description="Importance rank.")

    @property
    def node_id(self) -> str:
        """Fully-qualified reference `kind/key` used as a link endpoint."""
        return f"{self.kind}/{self.key}"

    def to_record(self) -> dict[str, Any]:
        return {"_key": self.key, "data": self.data, "weight": self.weight}

    @classmethod
    def from_record(cls, kind: str, record: dict[str, Any]) -> "Node":
        return cls(key=record["_key"], kind=kind, data=record.get("data"), weight=record.get("weight", 0.0))


START_EVENT = Node(key="start", kind="")
"""Sentinel cursor value for an event chain that has recorded nothing yet."""
