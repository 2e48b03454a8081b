"""Stat bar proportions for display."""

from pokescroll.config import MAX_INDIVIDUAL_STAT, MAX_TOTAL_STAT
from pokescroll.models.pokemon import Pokemon
from pokescroll.models.records import BASE_STATS


def percent_of(value: float, compare: float) -> float:
    """How many percent `value` is of `compare`."""
    if compare == 0:
        return 0.0
    return (value / compare) * 100


def stat_proportions(pokemon: Pokemon) -> dict[str, float]:
    """
    Percentage of each base stat against the highest known values.

    Individual stats are measured against MAX_INDIVIDUAL_STAT and the total
    against MAX_TOTAL_STAT. Stats the pokemon lacks count as 0.

    Raises:
        DetailsError: If the pokemon has no details loaded
    """
    stats = pokemon.stats
    proportions = {
        name: percent_of(stats.get(name, 0), MAX_INDIVIDUAL_STAT) for name in BASE_STATS
    }
    proportions["total"] = percent_of(pokemon.total_stats, MAX_TOTAL_STAT)
    return proportions
