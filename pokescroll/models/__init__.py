from pokescroll.models.errors import (
    DetailsError,
    EvolutionChainError,
    NotFoundError,
    PaginationError,
    PokedexError,
    RequestError,
    SelectionError,
    SpeciesError,
    ValidationError,
)
from pokescroll.models.evolution import EvolutionChain, EvolutionNode, LinkPosition
from pokescroll.models.pokemon import Pokemon, details_url_for
from pokescroll.models.records import (
    BASE_STATS,
    PokemonDetails,
    PokemonSpecies,
    RecordKind,
)
from pokescroll.models.stats import percent_of, stat_proportions

__all__ = [
    "BASE_STATS",
    "DetailsError",
    "EvolutionChain",
    "EvolutionChainError",
    "EvolutionNode",
    "LinkPosition",
    "NotFoundError",
    "PaginationError",
    "Pokemon",
    "PokedexError",
    "PokemonDetails",
    "PokemonSpecies",
    "RecordKind",
    "RequestError",
    "SelectionError",
    "SpeciesError",
    "ValidationError",
    "details_url_for",
    "percent_of",
    "stat_proportions",
]
