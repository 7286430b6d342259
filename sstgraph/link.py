"""Edge records of a Semantic Spacetime graph.

A `Link` joins two node references (`kind/key`) through an association.
Its storage key is derived from `(polarity, from_id, relation, to_id)` by
`sstgraph.keys.link_key`, so the same endpoints and relation always resolve
to the same record. The negated link (a "block") has a different key and is
an independent record.

The partition a link is stored in is not kept on the link itself: it follows
from the semantic type of the association named by `relation`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Link(BaseModel):
    """A directed, weighted edge between two node references."""

    model_config = {"frozen": True}

    key: str = Field(description="Derived storage key; see sstgraph.keys.link_key.")
    from_id: str = Field(description="Reference `kind/key` of the source node.")
    to_id: str = Field(description="Reference `kind/key` of the target node.")
    relation: str = Field(description="Key of the association this link instantiates.")
    data: Any = Field(default=None, description="Opaque caller payload.")
    weight: float = Field(default=0.0, description="Importance rank.")
    negated: bool = Field(default=False, description="True for a blocked (negated) relation.")

    def to_record(self) -> dict[str, Any]:
        """Serialize to the document shape stored in an edge partition."""
        return {
            "_key": self.key,
            "_from": self.from_id,
            "_to": self.to_id,
            "semantics": self.relation,
            "data": self.data,
            "weight": self.weight,
            "negate": self.negated,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Link":
        return cls(
            key=record["_key"],
            from_id=record["_from"],
            to_id=record["_to"],
            relation=record["semantics"],
            data=record.get("data"),
            weight=record.get("weight", 0.0),
            negated=record.get("negate", False),
        )
