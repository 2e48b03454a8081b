"""
The Pokemon entity.

A pokemon starts as a name plus its details URL and accumulates up to three
sub-records over time. Every attribute accessor is guarded: reading a value
whose sub-record is not attached raises the matching domain error.

Usage:
    pokemon = Pokemon.make("bulbasaur")
    pokemon.set_data(RecordKind.DETAILS, PokemonDetails.from_api(payload))
    pokemon.types  # ("grass", "poison")
"""

from typing import TYPE_CHECKING

from pokescroll.config import settings
from pokescroll.models.errors import (
    DetailsError,
    EvolutionChainError,
    SpeciesError,
    ValidationError,
)
from pokescroll.models.records import PokemonDetails, PokemonSpecies, RecordKind

if TYPE_CHECKING:
    from pokescroll.models.evolution import EvolutionChain, EvolutionNode


def details_url_for(name: str, base_url: str | None = None) -> str:
    """Canonical details endpoint for a pokemon name."""
    base = (base_url or settings.api_base_url).rstrip("/")
    return f"{base}/pokemon/{name}"


class Pokemon:
    """
    A single pokemon keyed by its canonical name.

    The name never changes after construction. Sub-record slots start empty
    and are filled through set_data().
    """

    def __init__(self, name: str, url: str) -> None:
        if not name:
            raise ValidationError("pokemon name cannot be empty")
        self._name = name
        self._url = url
        self._details: PokemonDetails | None = None
        self._species: PokemonSpecies | None = None
        self._evolution_chain: "EvolutionChain | None" = None

    @classmethod
    def make(
        cls,
        name: str,
        details: PokemonDetails | None = None,
        base_url: str | None = None,
    ) -> "Pokemon":
        """Build a stub pokemon from its name alone."""
        pokemon = cls(name, details_url_for(name, base_url))
        if details is not None:
            pokemon.set_data(RecordKind.DETAILS, details)
        return pokemon

    def __repr__(self) -> str:
        loaded = [kind for kind, present in self.contains().items() if present]
        return f"Pokemon(name={self._name!r}, loaded={loaded})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def details_url(self) -> str:
        return self._url

    # -------------------------------------------------------------------------
    # Sub-record attachment
    # -------------------------------------------------------------------------

    def set_data(
        self,
        kind: RecordKind,
        record: "PokemonDetails | PokemonSpecies | EvolutionChain",
    ) -> None:
        """
        Attach a sub-record to the slot named by `kind`.

        Raises:
            ValidationError: If the record does not belong in that slot, or a
                details record names a different pokemon
        """
        match kind:
            case RecordKind.DETAILS:
                if not isinstance(record, PokemonDetails):
                    raise ValidationError(f"[{kind.value}] record expected, got {record!r}")
                if record.name != self._name:
                    raise ValidationError(
                        f"[{record.name}] and [{self._name}] are not the same pokemon!"
                    )
                self._details = record
            case RecordKind.SPECIES:
                if not isinstance(record, PokemonSpecies):
                    raise ValidationError(f"[{kind.value}] record expected, got {record!r}")
                self._species = record
            case RecordKind.EVOLUTION_CHAIN:
                from pokescroll.models.evolution import EvolutionChain

                if not isinstance(record, EvolutionChain):
                    raise ValidationError(f"[{kind.value}] record expected, got {record!r}")
                self._evolution_chain = record

    def contains(self) -> dict[str, bool]:
        return {
            "has_details": self.has_details(),
            "has_species": self.has_species(),
            "has_evolution_chain": self.has_evolution_chain(),
        }

    def has_details(self) -> bool:
        return self._details is not None

    def has_species(self) -> bool:
        return self._species is not None

    def has_evolution_chain(self) -> bool:
        return self._evolution_chain is not None

    def get_details(self) -> PokemonDetails:
        if self._details is None:
            raise DetailsError(self._name, message=f"pokemon [{self._name}] has no details loaded!")
        return self._details

    def get_species(self) -> PokemonSpecies:
        if self._species is None:
            raise SpeciesError(self._name, message=f"pokemon [{self._name}] has no species loaded!")
        return self._species

    def get_evolution_chain(self) -> "EvolutionChain":
        if self._evolution_chain is None:
            raise EvolutionChainError(self._name)
        return self._evolution_chain

    # -------------------------------------------------------------------------
    # Details accessors
    # -------------------------------------------------------------------------

    @property
    def id(self) -> int:
        return self.get_details().id

    @property
    def weight(self) -> int:
        return self.get_details().weight

    @property
    def order(self) -> int:
        return self.get_details().order

    @property
    def front_sprite(self) -> str | None:
        return self.get_details().front_sprite

    @property
    def back_sprite(self) -> str | None:
        return self.get_details().back_sprite

    @property
    def official_artwork(self) -> str | None:
        return self.get_details().official_artwork

    @property
    def types(self) -> tuple[str, ...]:
        return self.get_details().types

    @property
    def abilities(self) -> tuple[str, ...]:
        return self.get_details().abilities

    @property
    def stats(self) -> dict[str, int]:
        return self.get_details().get_stats_dict()

    @property
    def total_stats(self) -> int:
        return self.get_details().total_stats()

    @property
    def species_name(self) -> str:
        return self.get_details().species_name

    def get_stat(self, name: str) -> int | str:
        return self.get_details().get_stat(name)

    # -------------------------------------------------------------------------
    # Species / evolution accessors
    # -------------------------------------------------------------------------

    def get_flavor_text(self, language: str = "en") -> str:
        return self.get_species().get_flavor_text(language)

    @property
    def chain(self) -> "EvolutionNode":
        """Root node of the attached evolution chain."""
        return self.get_evolution_chain().root
