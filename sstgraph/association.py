"""Associations: the closed vocabulary of relation kinds.

Every link in a Semantic Spacetime graph refers to an `Association` by key.
An association fixes two things about the relation:

- **Semantic type**: one of four coarse classes (Near, Follows, Contains,
  Expresses), signed to express direction. `CONTAINS` reads "contains" while
  its negation `CONSTITUTES` reads "is part of". The *magnitude* selects the
  edge partition a link is stored in; the sign only changes the label.
- **Readings**: four natural-language phrases for the forward, backward,
  negated-forward and negated-backward directions of the relation.

Associations are owned by an `AssociationRegistry`. Each registry starts
either from an independent copy of `DEFAULT_ASSOCIATIONS` or from a
caller-supplied replacement table, so registering an association in one
session never leaks into another.

Example:
    ```python
    registry = AssociationRegistry()
    registry.register(Association(
        key="grants_visa",
        semantic_type=SemanticType.EXPRESSES,
        fwd="grants visa to",
        bwd="holds visa from",
        nfwd="did not grant visa to",
        nbwd="does not hold visa from",
    ))
    registry.partition_for(registry.resolve("part_of").semantic_type)
    # EdgePartition.CONTAINS
    ```
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Iterator, Mapping

from pydantic import BaseModel, Field, field_validator

from sstgraph.errors import AssociationConflictError, UnknownAssociationError, UnknownPartitionError
from sstgraph.keys import sanitize


class SemanticType(IntEnum):
    """Signed semantic class of a relation.

    Positive members are the primary (forward-named) classes, negative
    members their inverse readings. `NEAR` is symmetric and has no negation.
    """

    NEAR = 0
    FOLLOWS = 1
    CONTAINS = 2
    EXPRESSES = 3
    PRECEDES = -1
    CONSTITUTES = -2
    DESCRIBES = -3


class EdgePartition(str, Enum):
    """The four fixed partitions links are stored in."""

    NEAR = "Near"
    FOLLOWS = "Follows"
    CONTAINS = "Contains"
    EXPRESSES = "Expresses"


_PARTITIONS = {
    0: EdgePartition.NEAR,
    1: EdgePartition.FOLLOWS,
    2: EdgePartition.CONTAINS,
    3: EdgePartition.EXPRESSES,
}

_LABELS = {
    0: "Near",
    1: "Follows",
    -1: "Precedes",
    2: "Contains",
    -2: "Constitutes",
    3: "Expresses",
    -3: "Describes",
}


def partition_for(semantic_type: int) -> EdgePartition:
    """Return the edge partition for a semantic type, ignoring its sign.

    Raises:
        UnknownPartitionError: If the magnitude is not one of the four classes.
    """
    partition = _PARTITIONS.get(abs(int(semantic_type)))
    if partition is None:
        raise UnknownPartitionError(f"sst: no link collection for semantic type: {int(semantic_type)}")
    return partition


def label(semantic_type: int) -> str:
    """Return the human-readable name of a signed semantic type.

    There are seven labels. Near has no negated form, so anything outside
    the seven known values renders as "unknown".
    """
    return _LABELS.get(int(semantic_type), "unknown")


class Association(BaseModel):
    """Invariant description of a relation, referenced by links through `key`."""

    model_config = {"frozen": True}

    key: str = Field(description="Canonical relation name; sanitized on construction.")
    semantic_type: SemanticType = Field(description="Signed semantic class of the relation.")
    fwd: str = Field(description="Forward reading, e.g. 'contains'.")
    bwd: str = Field(description="Backward reading, e.g. 'belongs to or is part of'.")
    nfwd: str = Field(description="Negated forward reading, e.g. 'does not contain'.")
    nbwd: str = Field(description="Negated backward reading, e.g. 'is not part of'.")

    @field_validator("key")
    @classmethod
    def _sanitize_key(cls, value: str) -> str:
        return sanitize(value)

    @property
    def partition(self) -> EdgePartition:
        return partition_for(self.semantic_type)

    @property
    def label(self) -> str:
        return label(self.semantic_type)

    def reading(self, inverse: bool = False, negated: bool = False) -> str:
        """Return the phrase for one of the four directions of this relation."""
        if negated:
            return self.nbwd if inverse else self.nfwd
        return self.bwd if inverse else self.fwd


def _assoc(key: str, semantic_type: SemanticType, fwd: str, bwd: str, nfwd: str, nbwd: str) -> Association:
    return Association(key=key, semantic_type=semantic_type, fwd=fwd, bwd=bwd, nfwd=nfwd, nbwd=nbwd)


_DEFAULTS = (
    _assoc("contains", SemanticType.CONTAINS, "contains", "belongs to or is part of", "does not contain", "is not part of"),
    _assoc("generalizes", SemanticType.CONTAINS, "generalizes", "is a special case of", "is not a generalization of", "is not a special case of"),
    _assoc("part_of", SemanticType.CONSTITUTES, "is part of", "incorporates", "is not part of", "doesn't incorporate"),
    _assoc("has_role", SemanticType.EXPRESSES, "has the role of", "is a role fulfilled by", "has no role", "is not a role fulfilled by"),
    _assoc("originates_from", SemanticType.FOLLOWS, "originates from", "is the source/origin of", "does not originate from", "is not the source/origin of"),
    _assoc("expresses", SemanticType.EXPRESSES, "expresses an attribute", "is an attribute of", "has no attribute", "is not an attribute of"),
    _assoc("promises", SemanticType.EXPRESSES, "promises/intends", "is intended/promised by", "rejects/promises to not", "is rejected by"),
    _assoc("has_name", SemanticType.EXPRESSES, "has proper name", "is the proper name of", "is not named", "isn't the proper name of"),
    _assoc("follows_from", SemanticType.FOLLOWS, "follows on from", "is followed by", "does not follow", "does not precede"),
    _assoc("uses", SemanticType.FOLLOWS, "uses", "is used by", "does not use", "is not used by"),
    _assoc("caused_by", SemanticType.FOLLOWS, "caused by", "may cause", "was not caused by", "probably didn't cause"),
    _assoc("derives_from", SemanticType.FOLLOWS, "derives from", "leads to", "does not derive from", "does not lead to"),
    _assoc("depends", SemanticType.FOLLOWS, "may depends on", "may determine", "doesn't depend on", "doesn't determine"),
    _assoc("next", SemanticType.PRECEDES, "comes before", "comes after", "is not before", "is not after"),
    _assoc("then", SemanticType.PRECEDES, "then", "previously", "but not", "didn't follow"),
    _assoc("leads_to", SemanticType.PRECEDES, "leads to", "doesn't imply", "doesn't reach", "doesn't precede"),
    _assoc("precedes", SemanticType.PRECEDES, "precedes", "follows", "doesn't precede", "doesn't follow"),
    _assoc("related", SemanticType.NEAR, "may be related to", "may be related to", "likely unrelated to", "likely unrelated to"),
    _assoc("alias", SemanticType.NEAR, "also known as", "also known as", "not known as", "not known as"),
    _assoc("is_like", SemanticType.NEAR, "is similar to", "is similar to", "is unlike", "is unlike"),
    _assoc("connected", SemanticType.NEAR, "is connected to", "is connected to", "is not connected to", "is not connected to"),
    _assoc("coactive", SemanticType.NEAR, "occurred together with", "occurred together with", "never appears with", "never appears with"),
)

DEFAULT_ASSOCIATIONS: Mapping[str, Association] = {a.key: a for a in _DEFAULTS}
"""Associations every registry starts with unless a replacement table is given."""


class AssociationRegistry:
    """Per-session table of associations keyed by sanitized relation name.

    Thread safety: registration is a plain dict update and is not guarded.
    Register custom associations before sharing the registry across tasks.
    """

    def __init__(self, associations: Mapping[str, Association] | None = None) -> None:
        """Create a registry.

        Args:
            associations: A full replacement table, keyed by relation name.
                When omitted the registry starts from a private copy of
                `DEFAULT_ASSOCIATIONS`.

        Raises:
            ValueError: If a table name does not sanitize to its association's key.
            AssociationConflictError: If two different table entries share a key.
        """
        self._associations: dict[str, Association] = {}
        source = DEFAULT_ASSOCIATIONS if associations is None else associations
        for name, association in source.items():
            if sanitize(name) != association.key:
                raise ValueError(f"Association table entry {name!r} holds association {association.key!r}")
            # Models are frozen, but copies keep each registry independent of the table it came from.
            self.register(association.model_copy(deep=True))

    def register(self, association: Association) -> Association:
        """Add an association, or accept an identical re-registration.

        Returns:
            The registered association.

        Raises:
            AssociationConflictError: If a different association already uses the key.
        """
        existing = self._associations.get(association.key)
        if existing is None:
            self._associations[association.key] = association
            return association
        if existing == association:
            return existing
        raise AssociationConflictError(association, existing)

    def resolve(self, name: str) -> Association:
        """Look up an association by (raw or sanitized) relation name.

        Raises:
            UnknownAssociationError: If no association is registered under the name.
        """
        key = sanitize(name)
        association = self._associations.get(key)
        if association is None:
            raise UnknownAssociationError(key)
        return association

    def get(self, name: str) -> Association | None:
        return self._associations.get(sanitize(name))

    def partition_for(self, semantic_type: int) -> EdgePartition:
        return partition_for(semantic_type)

    def label(self, semantic_type: int) -> str:
        return label(semantic_type)

    def keys(self) -> list[str]:
        return list(self._associations)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and sanitize(name) in self._associations

    def __iter__(self) -> Iterator[Association]:
        return iter(list(self._associations.values()))

    def __len__(self) -> int:
        return len(self._associations)
