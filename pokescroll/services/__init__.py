"""
PokeScroll services.

Registry, enrichment, evolution resolution and pagination.
"""

from pokescroll.services.browser import PokedexBrowser, get_resolution_step
from pokescroll.services.enrichment import EnrichmentOrchestrator, Page
from pokescroll.services.evolution import EvolutionResolver
from pokescroll.services.facets import Facets
from pokescroll.services.pagination import PageState, PaginationDriver
from pokescroll.services.registry import PokemonRegistry, Selection

__all__ = [
    "EnrichmentOrchestrator",
    "EvolutionResolver",
    "Facets",
    "Page",
    "PageState",
    "PaginationDriver",
    "PokedexBrowser",
    "PokemonRegistry",
    "Selection",
    "get_resolution_step",
]
