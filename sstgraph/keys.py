"""Deterministic key derivation.

Human-readable labels become storage keys by replacing every character that
a document key may not contain with an underscore. Two labels that sanitize to
the same string are the same entity; no escaping is attempted.

Link keys are derived from the link's identity alone (polarity, endpoints and
relation), so repeating a mutation always lands on the same record.
"""

import re

_DISALLOWED = re.compile(r"[^a-zA-Z0-9_:.@()+,=;$!*'%-]")


def sanitize(s: str) -> str:
    """Map an arbitrary string to a storage-legal key.

    Idempotent: `sanitize(sanitize(s)) == sanitize(s)`.
    """
    return _DISALLOWED.sub("_", s)


def node_ref(kind: str, key: str) -> str:
    """Return the fully-qualified reference `kind/key` for a node.

    `key` is sanitized here, so callers pass the raw label.
    """
    return f"{kind}/{sanitize(key)}"


def split_node_ref(ref: str) -> tuple[str, str]:
    """Split a `kind/key` reference into its kind and key.

    Raises:
        ValueError: If the reference has no kind or no key.
    """
    kind, sep, key = ref.rpartition("/")
    if not sep or not kind or not key:
        raise ValueError(f"Malformed node reference {ref!r}, expected 'kind/key'")
    return kind, key


def link_key(from_id: str, relation: str, to_id: str, negated: bool = False) -> str:
    """Derive the storage key of a link.

    The key is a pure function of its four identity components; payload and
    weight never contribute to it.
    """
    polarity = "-" if negated else "+"
    return sanitize(polarity + from_id + relation + to_id)
