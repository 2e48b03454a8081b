from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokescroll.api import health_router, pokemon_router
from pokescroll.clients.pokeapi import PokeAPIClient
from pokescroll.config import settings
from pokescroll.services.browser import PokedexBrowser
from pokescroll.services.enrichment import EnrichmentOrchestrator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the PokeAPI client for the app's lifetime and build the browser."""
    async with PokeAPIClient() as client:
        app.state.browser = PokedexBrowser(EnrichmentOrchestrator(client))
        yield


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(pokemon_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
