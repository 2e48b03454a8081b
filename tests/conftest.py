from collections.abc import AsyncGenerator

import pytest
from payloads import BASE_URL

from pokescroll.clients.pokeapi import PokeAPIClient
from pokescroll.services.enrichment import EnrichmentOrchestrator


@pytest.fixture
async def client() -> AsyncGenerator[PokeAPIClient, None]:
    """PokeAPI client pointed at the test base URL."""
    async with PokeAPIClient(base_url=BASE_URL, timeout=5.0) as api:
        yield api


@pytest.fixture
def orchestrator(client: PokeAPIClient) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(client)
