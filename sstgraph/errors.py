"""Exception hierarchy for the Semantic Spacetime engine.

Every failure raised by the engine derives from `SpacetimeError`, so callers
that want a single catch-all can use it. The subclasses map one-to-one onto
the failure kinds the engine distinguishes:

- `AssociationConflictError`: a different association is already registered
  under the same key.
- `UnknownAssociationError`: a relation name was never registered.
- `UnknownPartitionError`: a node kind was not declared for the session, or
  a semantic type magnitude falls outside the four edge classes. The second
  case is a programming error, not something a caller can recover from.
- `NilReferenceError`: a link endpoint (or a link) was `None`.
- `InvalidReferenceError`: a node reference is not of the form `kind/key`.
- `RecordNotFoundError`: a record the caller explicitly asked for is absent.
- `StoreError`: any failure reported by the backing record store, wrapped
  with the operation, partition and key that were being attempted.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator


class SpacetimeError(Exception):
    """Base class for all engine errors."""


class AssociationConflictError(SpacetimeError):
    """Raised when registering an association that differs from the stored one."""

    def __init__(self, candidate: Any, existing: Any) -> None:
        self.candidate = candidate
        self.existing = existing
        super().__init__(f"sst: failed to create association {candidate!r} due to existing association {existing!r}")


class UnknownAssociationError(SpacetimeError):
    """Raised when a relation name has no registered association."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"sst: invalid link type: {name}")


class UnknownPartitionError(SpacetimeError):
    """Raised for an undeclared node kind or an out-of-range semantic type."""


class NilReferenceError(SpacetimeError):
    """Raised when a node or link argument is None."""


class InvalidReferenceError(SpacetimeError):
    """Raised when a node reference cannot be split into kind and key."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"sst: malformed node reference: {ref!r}")


class RecordNotFoundError(SpacetimeError):
    """Raised when an explicitly requested record does not exist."""

    def __init__(self, partition: str, key: str) -> None:
        self.partition = partition
        self.key = key
        super().__init__(f"sst: no record {partition}/{key}")


class StoreError(SpacetimeError):
    """Opaque record store failure, annotated with what was being attempted."""

    def __init__(self, operation: str, partition: str, key: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.partition = partition
        self.key = key
        self.cause = cause
        message = f"sst: failed to {operation} {partition}/{key}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


@contextmanager
def store_operation(operation: str, partition: str, key: str) -> Iterator[None]:
    """Wrap backend failures raised inside the block in a `StoreError`.

    Engine errors pass through untouched so they are never double wrapped.

    Example:
        ```python
        with store_operation("read link", partition, key):
            record = await store.get(partition, key)
        ```
    """
    try:
        yield
    except SpacetimeError:
        raise
    except Exception as e:
        raise StoreError(operation, partition, key, e) from e
