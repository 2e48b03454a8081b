"""
Pagination driver.

Walks the pokemon list endpoint page by page. One page may be in flight at
a time. Once the API reports no next page the driver is exhausted for good
and issues no more requests. Failures are reported to the caller and never
retried here.

States:
    IDLE --request--> FETCHING --next link--> IDLE
                               --no next link--> EXHAUSTED (terminal)
                               --error--> FAILED
"""

import logging
from enum import Enum

from pokescroll.models.errors import PaginationError
from pokescroll.models.pokemon import Pokemon
from pokescroll.services.enrichment import EnrichmentOrchestrator, Page
from pokescroll.services.facets import Facets

logger = logging.getLogger(__name__)


class PageState(str, Enum):
    """Lifecycle of the pagination driver."""

    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class PaginationDriver:
    """Offset/limit cursor over the pokemon listing."""

    def __init__(self, orchestrator: EnrichmentOrchestrator, facets: Facets | None = None) -> None:
        self.orchestrator = orchestrator
        self.facets = facets or Facets()
        self.state = PageState.IDLE
        self.offset = 0
        self.last_page: Page | None = None

    def is_fetching(self) -> bool:
        return self.state is PageState.FETCHING

    def is_exhausted(self) -> bool:
        return self.state is PageState.EXHAUSTED

    async def request(
        self,
        offset: int,
        limit: int,
        facets: Facets | None = None,
        *,
        step: int | None = None,
    ) -> list[Pokemon]:
        """
        Load and enrich one page.

        The final page (no `next` link) is neither enriched nor registered;
        its names are not part of the returned list, and the driver becomes
        EXHAUSTED.

        Args:
            offset: Index of the first pokemon to list
            limit: Number of pokemon to list
            facets: Sub-records to load per pokemon. Defaults to the driver's.
            step: How far to advance the cursor on success. Defaults to `limit`.

        Returns:
            Every loaded pokemon, in listing order

        Raises:
            PaginationError: If another page request is in flight
            RequestError, DetailsError, SpeciesError: If the page fails; the
                driver moves to FAILED
        """
        registry = self.orchestrator.registry

        if self.state is PageState.EXHAUSTED:
            return registry.all_loaded()

        if self.state is PageState.FETCHING:
            raise PaginationError("A page request is already in flight")

        self.state = PageState.FETCHING
        try:
            page = await self.orchestrator.fetch_page(offset, limit, facets or self.facets)
        except Exception:
            self.state = PageState.FAILED
            raise

        self.last_page = page

        if page.is_last:
            self.state = PageState.EXHAUSTED
            logger.info("All pokemon are loaded (%d in registry)", len(registry))
        else:
            self.state = PageState.IDLE
            self.offset = offset + (step if step is not None else limit)

        return registry.all_loaded()
