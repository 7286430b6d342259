"""Record travellers' passports, visas and sightings as a Semantic Spacetime.

Modeling choices:
- Node records are events on the timeline
- Fragment records are persons
- Hub records are locations

Runs against an in-memory store by default. Pass `--arango` to use the
ArangoDB server configured through the SST_* environment variables.
"""

import asyncio
import sys

from sstgraph import Association, SemanticType, Spacetime, SpacetimeSettings
from sstgraph.storage.memory import InMemoryProvisioner
from sstgraph.strict import must


async def person_location(st: Spacetime, person: str, location: str) -> None:
    await must(st.create_node("Fragment", person, {"person": person}, 0))
    await must(st.create_node("Hub", location, None, 0))
    await must(
        st.next_event("Node", f"{person} in {location}", {"description": f"{person} observed in {location}"})
    )
    print(f"Timeline: {person} in {location}")


async def country_issued(st: Spacetime, person: str, location: str, document: str, kind: str) -> None:
    """Link a country hub to a person through a passport or visa association."""
    country = await must(st.create_node("Hub", location, None, 0))
    holder = await must(st.create_node("Fragment", person, None, 0))
    st.create_association(
        Association(
            key=document,
            semantic_type=SemanticType.EXPRESSES,
            fwd=f"grants {kind} to",
            bwd=f"holds {kind} from",
            nfwd=f"did not grant {kind} to",
            nbwd=f"does not hold {kind} from",
        )
    )
    await must(st.create_link(country, document, holder, weight=1.0))
    await must(
        st.next_event(
            "Node",
            f"{location} grants {document} to {person}",
            {"description": f"{location} granted {kind} {document} to {person}"},
        )
    )
    print(f"Timeline: {location} granted {kind} {document} to {person}")


async def main() -> None:
    settings = SpacetimeSettings(name="nation_spacetime", node_kinds=["Node", "Fragment", "Hub"])
    provisioner = None if "--arango" in sys.argv else InMemoryProvisioner()
    st = await Spacetime.open(settings, provisioner=provisioner)

    await country_issued(st, "Professor Burgess", "UK", "Number 12345", "passport")
    await country_issued(st, "Professor Burgess", "USA", "Visa Waiver", "visa")
    await person_location(st, "Professor Burgess", "USA")
    await person_location(st, "Professor Burgess", "UK")

    paris = await must(st.create_node("Hub", "Paris", {"description": "Paris, capital city of France"}, 1))
    france = await must(st.create_node("Hub", "France", {"description": "France, country in Europe"}, 100))

    await country_issued(st, "Emily", "France", "Schengen work visa", "visa")
    await person_location(st, "Emily", "Paris")

    await must(st.create_link(paris, "part_of", france, weight=100))

    await country_issued(st, "Captain Evil", "USA", "Work Visa", "visa")
    await person_location(st, "Captain Evil", "UK")
    await person_location(st, "Captain Evil", "USA")


if __name__ == "__main__":
    asyncio.run(main())
