"""
In-memory pokemon registry.

Keeps every pokemon seen during the session keyed by canonical name, in
first-seen order. Nothing is evicted. The first instance stored for a name
keeps its identity; later enrichment mutates it through set_data().
"""

from collections.abc import Iterator

from pokescroll.models.errors import NotFoundError, SelectionError
from pokescroll.models.pokemon import Pokemon


class PokemonRegistry:
    """Insertion-ordered name -> Pokemon store."""

    def __init__(self) -> None:
        self._pokemon: dict[str, Pokemon] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._pokemon

    def __len__(self) -> int:
        return len(self._pokemon)

    def __iter__(self) -> Iterator[Pokemon]:
        return iter(self._pokemon.values())

    def exists(self, name: str) -> bool:
        return name in self._pokemon

    def get(self, name: str) -> Pokemon:
        """
        Look up a registered pokemon.

        Raises:
            NotFoundError: If the name was never registered
        """
        try:
            return self._pokemon[name]
        except KeyError:
            raise NotFoundError(name) from None

    def find(self, name: str) -> Pokemon | None:
        return self._pokemon.get(name)

    def put(self, name: str, pokemon: Pokemon) -> Pokemon:
        """
        Register a pokemon unless the name is already taken.

        Returns:
            The instance stored under `name`, which is the existing one when
            the name was already registered
        """
        return self._pokemon.setdefault(name, pokemon)

    def all_loaded(self) -> list[Pokemon]:
        return list(self._pokemon.values())


class Selection:
    """
    The currently selected pokemon.

    Owned by the browsing controller and pointed at the registry it selects
    from. Only one pokemon is selected at a time.
    """

    def __init__(self, registry: PokemonRegistry) -> None:
        self._registry = registry
        self._selected: str | None = None

    def select(self, name: str) -> Pokemon:
        """
        Mark a loaded pokemon as selected.

        Raises:
            SelectionError: If the pokemon was not previously loaded
        """
        if not self._registry.exists(name):
            raise SelectionError(name)
        self._selected = name
        return self._registry.get(name)

    def get_selected(self) -> Pokemon | None:
        if self._selected is None:
            return None
        return self._registry.find(self._selected)

    def clear(self) -> None:
        self._selected = None
