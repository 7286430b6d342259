"""Session configuration.

Settings are read from keyword arguments first, then from environment
variables prefixed with `SST_` (for example `SST_URL`, `SST_PASSWORD`).
List and mapping fields are given as JSON in the environment:

    SST_NODE_KINDS='["Node", "Fragment", "Hub"]'
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sstgraph.association import Association, EdgePartition
from sstgraph.keys import sanitize


class SpacetimeSettings(BaseSettings):
    """Everything needed to open a Semantic Spacetime session."""

    model_config = SettingsConfigDict(env_prefix="SST_", extra="ignore")

    name: str = Field(default="semantic_spacetime", description="Session (database) name.")
    url: str = Field(default="http://localhost:8529", description="Backing store endpoint.")
    username: str = Field(default="root")
    password: str = Field(default="")
    node_kinds: list[str] = Field(default_factory=lambda: ["Node"], description="Declared node partitions.")
    associations: dict[str, Association] | None = Field(
        default=None,
        description="Full replacement for the default association table.",
    )
    log_level: str = Field(default="INFO", description="Python logging level for the sstgraph logger.")

    @field_validator("node_kinds")
    @classmethod
    def _check_node_kinds(cls, value: list[str]) -> list[str]:
        kinds = [k.strip() for k in value]
        if not kinds or any(not k for k in kinds):
            raise ValueError("node_kinds must be a non-empty list of non-empty names")
        if len(set(kinds)) != len(kinds):
            raise ValueError("node_kinds must not contain duplicates")
        reserved = {p.value for p in EdgePartition}.intersection(kinds)
        if reserved:
            raise ValueError(f"node_kinds may not reuse edge partition names: {sorted(reserved)}")
        return kinds

    @field_validator("associations")
    @classmethod
    def _check_associations(cls, value: dict[str, Association] | None) -> dict[str, Association] | None:
        if value is None:
            return value
        for name, association in value.items():
            if sanitize(name) != association.key:
                raise ValueError(f"associations entry {name!r} holds association {association.key!r}")
        return value
