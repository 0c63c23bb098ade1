"""
Basic usage example for eventkey.

Computes ids for a few events directly, then runs the same transform as an
enricher next to another enricher.
"""

import asyncio
from datetime import datetime, timezone

from eventkey import HashIdGenerator, HashIdSettings, extract_timestamp
from eventkey.plugins import BaseEnricher, HashIdEnricher, enrich_parallel


class EnvironmentEnricher(BaseEnricher):
    name = "environment"

    async def enrich(self, event: dict) -> dict:
        return {"env": "development"}


async def main() -> None:
    """Demonstrate basic eventkey usage."""

    settings = HashIdSettings(source=["message", "[client][ip]"], method="SHA1")
    generator = HashIdGenerator(settings)

    events = [
        {
            "@timestamp": datetime(2016, 1, 1, 2, 0, 5, tzinfo=timezone.utc),
            "message": "login",
            "client": {"ip": "192.168.1.1"},
        },
        {
            "@timestamp": datetime(2016, 1, 1, 2, 0, 0, tzinfo=timezone.utc),
            "message": "login",
            "client": {"ip": "192.168.1.2"},
        },
    ]
    for event in events:
        hashid = generator.apply(event)
        print(hashid, extract_timestamp(hashid))

    # Ids sort by timestamp first
    print(sorted(e["hashid"] for e in events))

    # Same transform inside an enricher stage
    enrichers = [EnvironmentEnricher(), HashIdEnricher(config=settings)]
    enriched = await enrich_parallel({"message": "logout"}, enrichers)
    print(enriched)


if __name__ == "__main__":
    asyncio.run(main())
