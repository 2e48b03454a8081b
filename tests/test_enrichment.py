"""Tests for the enrichment orchestrator."""

import asyncio

import httpx
import pytest
import respx
from payloads import (
    BASE_URL,
    GatedClient,
    details_payload,
    list_payload,
    mock_details,
    mock_list,
    mock_species,
)

from pokescroll.models.errors import DetailsError, RequestError, SpeciesError, ValidationError
from pokescroll.models.pokemon import Pokemon
from pokescroll.models.records import PokemonDetails, RecordKind
from pokescroll.services.enrichment import EnrichmentOrchestrator
from pokescroll.services.facets import Facets


class TestFacets:
    def test_defaults_to_details_only(self) -> None:
        facets = Facets()
        assert facets.details is True
        assert facets.needs_species is False

    def test_evolution_chain_implies_species(self) -> None:
        assert Facets(evolution_chain=True).needs_species is True


class TestFetchEntity:
    @respx.mock
    async def test_details_loaded_and_registered(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """Fetched pokemon has details and is stored under its name."""
        mock_details("bulbasaur", 1)

        pokemon = await orchestrator.fetch_entity("bulbasaur", Facets(details=True))

        assert pokemon.name == "bulbasaur"
        assert orchestrator.registry.get("bulbasaur") is pokemon
        assert orchestrator.registry.get("bulbasaur").has_details() is True
        assert pokemon.id == 1

    @respx.mock
    async def test_registered_pokemon_not_refetched(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """A loaded pokemon is returned from the registry without a request."""
        route = mock_details("bulbasaur", 1)
        first = await orchestrator.fetch_entity("bulbasaur")

        second = await orchestrator.fetch_entity("bulbasaur")

        assert second is first
        assert route.call_count == 1

    @respx.mock
    async def test_reload_refetches_into_same_instance(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """Reload re-fetches but keeps the registered identity."""
        route = mock_details("bulbasaur", 1)
        first = await orchestrator.fetch_entity("bulbasaur")
        first_details = first.get_details()

        second = await orchestrator.fetch_entity("bulbasaur", reload=True)

        assert second is first
        assert route.call_count == 2
        assert second.get_details() is not first_details

    @respx.mock
    async def test_unsaved_fetch_leaves_registry_alone(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        mock_details("ivysaur", 2)

        pokemon = await orchestrator.fetch_entity("ivysaur", save=False)

        assert pokemon.has_details()
        assert orchestrator.registry.exists("ivysaur") is False

    @respx.mock
    async def test_details_and_species(self, orchestrator: EnrichmentOrchestrator) -> None:
        mock_details("bulbasaur", 1)
        mock_species("bulbasaur")

        pokemon = await orchestrator.fetch_entity("bulbasaur", Facets(details=True, species=True))

        assert pokemon.has_details()
        assert pokemon.has_species()
        assert pokemon.get_flavor_text() == "A strange seed was planted."

    async def test_no_facets_registers_stub_only(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """With nothing requested no request is made."""
        pokemon = await orchestrator.fetch_entity("bulbasaur", Facets(details=False))

        assert orchestrator.registry.get("bulbasaur") is pokemon
        assert pokemon.has_details() is False

    async def test_details_and_species_overlap(self) -> None:
        """Both requests are in flight before either completes."""
        client = GatedClient(expected=2)
        orchestrator = EnrichmentOrchestrator(client)

        pokemon = await orchestrator.fetch_entity("bulbasaur", Facets(details=True, species=True))

        assert len(client.started) == 2
        assert pokemon.has_details() and pokemon.has_species()

    @respx.mock
    async def test_details_failure_is_wrapped(self, orchestrator: EnrichmentOrchestrator) -> None:
        respx.get(f"{BASE_URL}/pokemon/missingno").mock(return_value=httpx.Response(404))

        with pytest.raises(DetailsError, match="missingno") as exc_info:
            await orchestrator.fetch_entity("missingno")

        assert exc_info.value.not_found is True
        assert isinstance(exc_info.value.__cause__, RequestError)

    @respx.mock
    async def test_failure_keeps_sibling_attachment(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """A failed facet does not roll back one that completed."""
        mock_details("bulbasaur", 1)
        respx.get(f"{BASE_URL}/pokemon-species/bulbasaur").mock(
            return_value=httpx.Response(503)
        )

        with pytest.raises(RequestError):
            await orchestrator.fetch_entity("bulbasaur", Facets(details=True, species=True))

        # Let the details request finish if it was still running
        for _ in range(10):
            await asyncio.sleep(0)
        assert orchestrator.registry.get("bulbasaur").has_details()

    @respx.mock
    async def test_details_name_mismatch_rejected(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        respx.get(f"{BASE_URL}/pokemon/bulbasaur").mock(
            return_value=httpx.Response(200, json=details_payload("ivysaur", 2))
        )

        with pytest.raises(ValidationError, match="not the same pokemon"):
            await orchestrator.fetch_entity("bulbasaur")


class TestFetchSpecies:
    @respx.mock
    async def test_uses_species_name_from_details(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """Attached details provide the authoritative species name."""
        route = mock_species("deoxys")
        details = PokemonDetails.from_api(
            details_payload("deoxys-attack", 386, species="deoxys")
        )
        pokemon = Pokemon.make("deoxys-attack", details=details, base_url=BASE_URL)

        await orchestrator.fetch_species(pokemon)

        assert route.call_count == 1
        assert pokemon.has_species()

    @respx.mock
    async def test_guess_falls_back_to_base_name(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """A 404 on the guessed name retries with the part before the hyphen."""
        guess = mock_species("deoxys-attack", status_code=404)
        forced = mock_species("deoxys")
        pokemon = Pokemon.make("deoxys-attack", base_url=BASE_URL)

        await orchestrator.fetch_species(pokemon)

        assert guess.call_count == 1
        assert forced.call_count == 1
        assert pokemon.has_species()

    @respx.mock
    async def test_fallback_failure_names_both(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        mock_species("deoxys-attack", status_code=404)
        forced = mock_species("deoxys", status_code=404)
        pokemon = Pokemon.make("deoxys-attack", base_url=BASE_URL)

        with pytest.raises(SpeciesError) as exc_info:
            await orchestrator.fetch_species(pokemon)

        message = str(exc_info.value)
        assert "deoxys-attack" in message
        assert "forced deoxys" in message
        assert exc_info.value.forced_name == "deoxys"
        assert forced.call_count == 1

    @respx.mock
    async def test_non_404_is_not_retried(self, orchestrator: EnrichmentOrchestrator) -> None:
        """Server errors propagate without a fallback request."""
        route = mock_species("deoxys-attack", status_code=500)
        pokemon = Pokemon.make("deoxys-attack", base_url=BASE_URL)

        with pytest.raises(RequestError) as exc_info:
            await orchestrator.fetch_species(pokemon)

        assert exc_info.value.status_code == 500
        assert route.call_count == 1
        assert len(respx.calls) == 1

    @respx.mock
    async def test_unhyphenated_404_fails_without_retry(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        mock_species("missingno", status_code=404)
        pokemon = Pokemon.make("missingno", base_url=BASE_URL)

        with pytest.raises(SpeciesError, match="missingno"):
            await orchestrator.fetch_species(pokemon)

        assert len(respx.calls) == 1

    @respx.mock
    async def test_merges_into_registered_instance(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """Data for a registered name lands on the registered instance."""
        registered = Pokemon.make("bulbasaur", base_url=BASE_URL)
        orchestrator.registry.put("bulbasaur", registered)
        mock_species("bulbasaur")

        result = await orchestrator.fetch_species(Pokemon.make("bulbasaur", base_url=BASE_URL))

        assert result is registered
        assert registered.has_species()


class TestFetchPage:
    @respx.mock
    async def test_page_loads_in_listing_order(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        """Every listed pokemon is enriched and kept in listing order."""
        mock_list(["bulbasaur", "ivysaur"])
        mock_details("bulbasaur", 1)
        mock_details("ivysaur", 2)
        mock_species("bulbasaur")
        mock_species("ivysaur")

        page = await orchestrator.fetch_page(0, 2, Facets(species=True))

        loaded = orchestrator.registry.all_loaded()
        assert page.names == ("bulbasaur", "ivysaur")
        assert [p.name for p in loaded] == ["bulbasaur", "ivysaur"]
        assert all(p.has_details() and p.has_species() for p in loaded)

    @respx.mock
    async def test_details_always_loaded(self, orchestrator: EnrichmentOrchestrator) -> None:
        mock_list(["bulbasaur"])
        mock_details("bulbasaur", 1)

        await orchestrator.fetch_page(0, 1, Facets(details=False))

        assert orchestrator.registry.get("bulbasaur").has_details()

    @respx.mock
    async def test_last_page_not_enriched(self, orchestrator: EnrichmentOrchestrator) -> None:
        mock_list(["eternatus"], has_next=False)

        page = await orchestrator.fetch_page(1300, 20)

        assert page.is_last is True
        assert len(orchestrator.registry) == 0
        assert len(respx.calls) == 1

    @respx.mock
    async def test_one_failure_fails_the_page(
        self, orchestrator: EnrichmentOrchestrator
    ) -> None:
        mock_list(["bulbasaur", "missingno"])
        mock_details("bulbasaur", 1)
        respx.get(f"{BASE_URL}/pokemon/missingno").mock(return_value=httpx.Response(404))

        with pytest.raises(DetailsError, match="missingno"):
            await orchestrator.fetch_page(0, 2)

        assert orchestrator.registry.exists("bulbasaur")

    async def test_page_entries_fetched_together(self) -> None:
        """Every listed pokemon's details request is in flight before any completes."""
        client = GatedClient(
            expected=2,
            immediate={f"{BASE_URL}/pokemon": list_payload(["bulbasaur", "ivysaur"])},
        )
        orchestrator = EnrichmentOrchestrator(client)

        await orchestrator.fetch_page(0, 2)

        assert sorted(client.started) == [
            f"{BASE_URL}/pokemon/bulbasaur",
            f"{BASE_URL}/pokemon/ivysaur",
        ]
        assert all(p.has_details() for p in orchestrator.registry.all_loaded())

    @respx.mock
    async def test_malformed_listing(self, orchestrator: EnrichmentOrchestrator) -> None:
        respx.get(url__regex=rf"^{BASE_URL}/pokemon\?").mock(
            return_value=httpx.Response(200, json={"results": [{"url": "x"}], "next": None})
        )

        with pytest.raises(ValidationError, match="malformed pokemon list"):
            await orchestrator.fetch_listing(0, 20)

    async def test_invalid_window(self, orchestrator: EnrichmentOrchestrator) -> None:
        with pytest.raises(ValueError, match="Invalid page window"):
            await orchestrator.fetch_listing(-1, 20)


class TestMerge:
    def test_merge_prefers_registered(self, orchestrator: EnrichmentOrchestrator) -> None:
        registered = Pokemon.make("bulbasaur")
        orchestrator.registry.put("bulbasaur", registered)
        details = PokemonDetails.from_api(details_payload("bulbasaur"))

        target = orchestrator.merge(Pokemon.make("bulbasaur"), RecordKind.DETAILS, details)

        assert target is registered
        assert registered.has_details()
