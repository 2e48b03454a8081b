import pytest

from pokescroll.models.errors import NotFoundError, SelectionError
from pokescroll.models.pokemon import Pokemon
from pokescroll.services.registry import PokemonRegistry, Selection


@pytest.fixture
def registry() -> PokemonRegistry:
    registry = PokemonRegistry()
    for name in ("bulbasaur", "ivysaur", "venusaur"):
        registry.put(name, Pokemon.make(name))
    return registry


class TestPokemonRegistry:
    def test_exists(self, registry: PokemonRegistry) -> None:
        assert registry.exists("bulbasaur") is True
        assert registry.exists("charmander") is False
        assert "ivysaur" in registry

    def test_get_unknown_raises(self, registry: PokemonRegistry) -> None:
        with pytest.raises(NotFoundError, match="charmander"):
            registry.get("charmander")

    def test_find_unknown_returns_none(self, registry: PokemonRegistry) -> None:
        assert registry.find("charmander") is None

    def test_put_is_first_writer_wins(self, registry: PokemonRegistry) -> None:
        original = registry.get("bulbasaur")

        stored = registry.put("bulbasaur", Pokemon.make("bulbasaur"))

        assert stored is original
        assert registry.get("bulbasaur") is original
        assert len(registry) == 3

    def test_all_loaded_keeps_insertion_order(self, registry: PokemonRegistry) -> None:
        registry.put("charmander", Pokemon.make("charmander"))
        registry.put("bulbasaur", Pokemon.make("bulbasaur"))

        names = [p.name for p in registry.all_loaded()]

        assert names == ["bulbasaur", "ivysaur", "venusaur", "charmander"]

    def test_iterates_pokemon(self, registry: PokemonRegistry) -> None:
        assert [p.name for p in registry] == ["bulbasaur", "ivysaur", "venusaur"]


class TestSelection:
    def test_nothing_selected_initially(self, registry: PokemonRegistry) -> None:
        assert Selection(registry).get_selected() is None

    def test_select_returns_registered_instance(self, registry: PokemonRegistry) -> None:
        selection = Selection(registry)

        pokemon = selection.select("ivysaur")

        assert pokemon is registry.get("ivysaur")
        assert selection.get_selected() is pokemon

    def test_select_overwrites_previous(self, registry: PokemonRegistry) -> None:
        selection = Selection(registry)
        selection.select("ivysaur")
        selection.select("venusaur")
        assert selection.get_selected().name == "venusaur"

    def test_select_unloaded_raises(self, registry: PokemonRegistry) -> None:
        selection = Selection(registry)
        selection.select("ivysaur")

        with pytest.raises(SelectionError, match="wasn't previously loaded"):
            selection.select("mew")

        assert selection.get_selected().name == "ivysaur"

    def test_clear(self, registry: PokemonRegistry) -> None:
        selection = Selection(registry)
        selection.select("ivysaur")
        selection.clear()
        assert selection.get_selected() is None
