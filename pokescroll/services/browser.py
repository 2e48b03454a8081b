"""
Browsing controller.

Glue between the enrichment core and whatever renders it (the HTTP API or
the CLI job). Owns the pagination cursor and the current selection.

The first page is sized from the viewport width so wide screens fill up in
one request; every later page uses the fixed step and starts right after
the rows already loaded.
"""

import logging

from pokescroll.config import DEFAULT_RESOLUTION_STEP, RESOLUTION_STEPS, settings
from pokescroll.models.pokemon import Pokemon
from pokescroll.services.enrichment import EnrichmentOrchestrator
from pokescroll.services.facets import Facets
from pokescroll.services.pagination import PaginationDriver
from pokescroll.services.registry import Selection

logger = logging.getLogger(__name__)


def get_resolution_step(width: int) -> int:
    """Number of pokemon to load first for a viewport `width` pixels wide."""
    for min_width, step in RESOLUTION_STEPS:
        if width >= min_width:
            return step
    return DEFAULT_RESOLUTION_STEP


class PokedexBrowser:
    """Incremental list plus a single selected pokemon."""

    def __init__(
        self,
        orchestrator: EnrichmentOrchestrator,
        step: int | None = None,
        width: int | None = None,
        facets: Facets | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.step = step or settings.page_step
        self.first_step = get_resolution_step(width) if width is not None else self.step
        self.driver = PaginationDriver(orchestrator, facets)
        self.selection = Selection(orchestrator.registry)

    def can_load(self) -> bool:
        return not self.driver.is_fetching() and not self.driver.is_exhausted()

    def is_exhausted(self) -> bool:
        return self.driver.is_exhausted()

    def loaded(self) -> list[Pokemon]:
        return self.orchestrator.registry.all_loaded()

    def selected(self) -> Pokemon | None:
        return self.selection.get_selected()

    async def load_next(self) -> list[Pokemon]:
        """
        Load the next page of pokemon.

        Returns:
            Every loaded pokemon, in listing order

        Raises:
            PaginationError: If a page is already being loaded
        """
        limit = self.first_step if self.driver.last_page is None else self.step
        offset = self.driver.offset
        logger.debug("Loading pokemon %d-%d", offset, offset + limit)
        return await self.driver.request(offset, limit, step=limit)

    async def select(self, name: str) -> Pokemon:
        """
        Select a loaded pokemon and load its species and evolution chain.

        Raises:
            SelectionError: If the pokemon was never loaded
            SpeciesError: If its species data cannot be found
        """
        pokemon = self.selection.select(name)
        if pokemon.has_species() and (
            pokemon.has_evolution_chain() or pokemon.get_species().evolution_chain_url == ""
        ):
            return pokemon
        return await self.orchestrator.fetch_species(pokemon, evolution_chain=True)
