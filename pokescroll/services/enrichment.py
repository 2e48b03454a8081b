"""
Enrichment orchestrator.

Turns pokemon names into enriched Pokemon instances. Requested sub-records
are fetched concurrently and merged into the registry; the first failure
fails the whole call while sibling requests run to completion (no rollback,
no cancellation).

Workflow for one page:
1. GET the list endpoint for (offset, limit)
2. Register every listed name, in listing order
3. Fetch details and, when asked, species/evolution data for all of them at once
"""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass

from pokescroll.clients.pokeapi import PokeAPIClient
from pokescroll.models.errors import DetailsError, RequestError, SpeciesError, ValidationError
from pokescroll.models.evolution import EvolutionChain
from pokescroll.models.pokemon import Pokemon
from pokescroll.models.records import PokemonDetails, PokemonSpecies, RecordKind
from pokescroll.services.evolution import EvolutionResolver
from pokescroll.services.facets import Facets
from pokescroll.services.registry import PokemonRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """One response from the list endpoint."""

    names: tuple[str, ...]
    next_url: str | None
    count: int | None = None

    @property
    def is_last(self) -> bool:
        return self.next_url is None


class EnrichmentOrchestrator:
    """Fetches pokemon sub-records and merges them into a registry."""

    def __init__(self, client: PokeAPIClient, registry: PokemonRegistry | None = None) -> None:
        self.client = client
        self.registry = registry if registry is not None else PokemonRegistry()
        self.evolution = EvolutionResolver(self)
        self._details_in_flight: dict[str, asyncio.Task[Pokemon]] = {}

    async def fetch_entity(
        self,
        name: str,
        facets: Facets | None = None,
        *,
        reload: bool = False,
        save: bool = True,
    ) -> Pokemon:
        """
        Fetch a single pokemon with the requested sub-records.

        Args:
            name: Canonical pokemon name
            facets: Sub-records to load. Defaults to details only.
            reload: Re-fetch even if the pokemon is already registered
            save: Register the pokemon. Pass False for lookups that must not
                change the registry's listing order.

        Returns:
            The pokemon that received the data (the registered instance when
            one exists)

        Raises:
            DetailsError: If details were requested and could not be fetched
            SpeciesError: If species data could not be fetched after the retry
            RequestError: On non-404 transport failures of species/chain requests
        """
        facets = facets or Facets()

        existing = self.registry.find(name)
        if existing is not None and not reload:
            return existing

        pokemon = existing or Pokemon.make(name, base_url=self.client.base_url)
        if save:
            pokemon = self.registry.put(name, pokemon)

        jobs = []
        if facets.details:
            jobs.append(self._start_details(pokemon))
        if facets.needs_species:
            jobs.append(self.fetch_species(pokemon, evolution_chain=facets.evolution_chain))

        if not jobs:
            return pokemon

        results = await asyncio.gather(*jobs)
        return results[0]

    def _start_details(self, pokemon: Pokemon) -> asyncio.Task[Pokemon]:
        task = asyncio.ensure_future(self.fetch_details(pokemon))
        self._details_in_flight[pokemon.name] = task
        task.add_done_callback(lambda done: self._forget_details(pokemon.name, done))
        return task

    def _forget_details(self, name: str, task: asyncio.Task[Pokemon]) -> None:
        if self._details_in_flight.get(name) is task:
            del self._details_in_flight[name]

    async def wait_for_details(self, name: str) -> None:
        """
        Wait for a details request started by fetch_entity for `name`, if any.

        Raises:
            DetailsError: If that request fails
        """
        task = self._details_in_flight.get(name)
        if task is not None:
            await task

    async def fetch_listing(self, offset: int, limit: int) -> Page:
        """
        Fetch one page of names from the list endpoint, without enrichment.

        Raises:
            RequestError: If the request fails
            ValidationError: If the payload has no usable results list
        """
        if offset < 0 or limit <= 0:
            raise ValueError(f"Invalid page window: offset={offset}, limit={limit}")

        payload = await self.client.get(
            self.client.url("pokemon"),
            params={"offset": offset, "limit": limit},
        )

        try:
            names = tuple(str(entry["name"]) for entry in payload.get("results") or [])
        except (KeyError, TypeError) as e:
            raise ValidationError(f"malformed pokemon list payload: {e!r}") from e

        return Page(names=names, next_url=payload.get("next"), count=payload.get("count"))

    async def fetch_page(self, offset: int, limit: int, facets: Facets | None = None) -> Page:
        """
        Fetch one page and enrich every listed pokemon.

        Details are always loaded; species and evolution data follow `facets`.
        The last page (no `next` link) is returned without enrichment.
        """
        page = await self.fetch_listing(offset, limit)
        if page.is_last:
            return page

        facets = dataclasses.replace(facets or Facets(), details=True)
        await asyncio.gather(*(self.fetch_entity(name, facets) for name in page.names))
        return page

    async def fetch_details(self, pokemon: Pokemon) -> Pokemon:
        """
        Load the details sub-record.

        Raises:
            DetailsError: If the details request fails for any reason
        """
        try:
            payload = await self.client.get(pokemon.details_url)
        except RequestError as e:
            raise DetailsError(pokemon.name, not_found=e.not_found) from e

        return self.merge(pokemon, RecordKind.DETAILS, PokemonDetails.from_api(payload))

    async def fetch_species(self, pokemon: Pokemon, evolution_chain: bool = False) -> Pokemon:
        """
        Load the species sub-record, and optionally the evolution chain.

        The species name comes from details when they are attached. Otherwise
        the pokemon name is used as a guess, and a 404 is retried once with
        the part before the first hyphen ("deoxys-attack" -> "deoxys").

        Raises:
            SpeciesError: If the species cannot be found under either name
            RequestError: On non-404 failures of the first attempt
        """
        name = pokemon.species_name if pokemon.has_details() else pokemon.name

        try:
            payload = await self.client.get(self.client.url("pokemon-species", name))
        except RequestError as e:
            if not e.not_found:
                raise
            forced_name = name.split("-")[0]
            if forced_name == name:
                raise SpeciesError(name, forced_name=forced_name) from e

            logger.warning("Species [%s] not found, retrying as [%s]", name, forced_name)
            try:
                payload = await self.client.get(self.client.url("pokemon-species", forced_name))
            except RequestError as retry_error:
                raise SpeciesError(name, forced_name=forced_name) from retry_error

        target = self.merge(pokemon, RecordKind.SPECIES, PokemonSpecies.from_api(payload))

        if evolution_chain:
            await self.evolution.resolve(target)

        return target

    def merge(
        self,
        pokemon: Pokemon,
        kind: RecordKind,
        record: PokemonDetails | PokemonSpecies | EvolutionChain,
    ) -> Pokemon:
        """Attach a record, preferring the registered instance for the same name."""
        target = self.registry.find(pokemon.name) or pokemon
        target.set_data(kind, record)
        return target
