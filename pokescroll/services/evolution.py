"""
Evolution chain resolution.

Fetches the chain referenced by a pokemon's species record, builds the
node tree, then enriches every node's pokemon with details in one
concurrent pass. Chain participants are fetched without registering them,
so they do not jump ahead of the paginated listing order.
"""

import asyncio
import copy
import logging
from typing import TYPE_CHECKING

from pokescroll.models.errors import DetailsError, SpeciesError
from pokescroll.models.evolution import EvolutionChain, EvolutionNode
from pokescroll.models.pokemon import Pokemon
from pokescroll.models.records import RecordKind
from pokescroll.services.facets import Facets

if TYPE_CHECKING:
    from pokescroll.services.enrichment import EnrichmentOrchestrator

logger = logging.getLogger(__name__)

NODE_FACETS = Facets(details=True)


class EvolutionResolver:
    """Loads and enriches the evolution chain of a pokemon."""

    def __init__(self, orchestrator: "EnrichmentOrchestrator") -> None:
        self.orchestrator = orchestrator

    async def resolve(self, pokemon: Pokemon) -> Pokemon:
        """
        Attach the evolution chain to a pokemon that has species data.

        A species without a chain URL is returned unchanged and nothing is
        fetched. A chain with a single stage is attached without enriching
        its node.

        Raises:
            SpeciesError: If the pokemon has no species attached
            RequestError: If the chain request fails
            ValidationError: If the chain payload cannot be parsed
        """
        if not pokemon.has_species():
            raise SpeciesError(
                pokemon.name, message=f"pokemon [{pokemon.name}] has no species defined!"
            )

        url = pokemon.get_species().evolution_chain_url
        if url == "":
            return pokemon

        client = self.orchestrator.client
        payload = await client.get(url)
        chain = EvolutionChain.from_api(payload, base_url=client.base_url)
        pokemon = self.orchestrator.merge(pokemon, RecordKind.EVOLUTION_CHAIN, chain)

        if chain.is_single():
            return pokemon

        # Layout is computed up front; fetch completion order cannot affect it
        positions = chain.link_map()
        await asyncio.gather(*(self._enrich_node(pokemon, p.node) for p in positions))

        return pokemon

    async def _enrich_node(self, root: Pokemon, node: EvolutionNode) -> None:
        name = node.name

        try:
            enriched = await self.orchestrator.fetch_entity(name, NODE_FACETS, save=False)
        except DetailsError:
            logger.info("Details for [%s] in evolution chain not found", name)
            # Chain species names do not always match a fetchable pokemon name
            if self._root_species_name(root) != name:
                return
            await self.orchestrator.wait_for_details(root.name)
            if root.has_details():
                node.set_pokemon(copy.copy(root))
            return

        node.set_pokemon(enriched)

    @staticmethod
    def _root_species_name(root: Pokemon) -> str:
        """The species the root was resolved under, even before its details arrive."""
        species_name = root.get_species().name
        if species_name:
            return species_name
        return root.species_name if root.has_details() else ""
