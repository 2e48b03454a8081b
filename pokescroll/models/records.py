"""
Sub-records attached to a Pokemon.

Each record is decoded once from its PokeAPI payload and never changes
afterwards. A re-fetch builds a new record and replaces the slot.

References:
    https://pokeapi.co/docs/v2#pokemon
    https://pokeapi.co/docs/v2#pokemon-species
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pokescroll.models.errors import SpeciesError, ValidationError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

BASE_STATS = (
    "hp",
    "attack",
    "defense",
    "special-attack",
    "special-defense",
    "speed",
)


class RecordKind(str, Enum):
    """Which sub-record slot a payload belongs to."""

    DETAILS = "details"
    SPECIES = "species"
    EVOLUTION_CHAIN = "evolution_chain"


def _name_of(entry: dict[str, Any], key: str) -> str:
    """Read `entry[key]["name"]`, the PokeAPI named-resource shape."""
    return str(entry[key]["name"])


@dataclass(frozen=True, slots=True)
class PokemonDetails:
    """
    Data from the /pokemon/{name} endpoint.

    Attributes:
        id: National dex id
        name: Pokemon name, must match the entity it is attached to
        weight: Weight in hectograms
        order: Sort order used by the API
        front_sprite: Default front sprite URL
        back_sprite: Default back sprite URL
        official_artwork: Official artwork URL
        types: Type names in slot order
        abilities: Ability names in slot order
        stats: (stat name, base value) pairs in API order
        species_name: Name of the species this pokemon belongs to
    """

    id: int
    name: str
    weight: int
    order: int
    species_name: str
    front_sprite: str | None = None
    back_sprite: str | None = None
    official_artwork: str | None = None
    types: tuple[str, ...] = field(default_factory=tuple)
    abilities: tuple[str, ...] = field(default_factory=tuple)
    stats: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "PokemonDetails":
        try:
            sprites = payload.get("sprites") or {}
            artwork = (sprites.get("other") or {}).get("official-artwork") or {}
            return cls(
                id=int(payload["id"]),
                name=str(payload["name"]),
                weight=int(payload.get("weight") or 0),
                order=int(payload.get("order") or 0),
                species_name=_name_of(payload, "species"),
                front_sprite=sprites.get("front_default"),
                back_sprite=sprites.get("back_default"),
                official_artwork=artwork.get("front_default"),
                types=tuple(_name_of(t, "type") for t in payload.get("types", [])),
                abilities=tuple(_name_of(a, "ability") for a in payload.get("abilities", [])),
                stats=tuple(
                    (_name_of(s, "stat"), int(s["base_stat"])) for s in payload.get("stats", [])
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"malformed pokemon details payload: {e!r}") from e

    def get_stats_dict(self) -> dict[str, int]:
        return dict(self.stats)

    def get_stat(self, name: str) -> int | str:
        """Base value of one stat, or "" when the pokemon has no such stat."""
        return self.get_stats_dict().get(name, "")

    def total_stats(self) -> int:
        return sum(value for _, value in self.stats)


@dataclass(frozen=True, slots=True)
class PokemonSpecies:
    """
    Data from the /pokemon-species/{name} endpoint.

    Attributes:
        name: Species name the record was served under, "" when the payload has none
        flavor_texts: (language code, raw flavor text) pairs in API order
        evolution_chain_url: URL of the evolution chain, "" when none is recorded
    """

    name: str = ""
    flavor_texts: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    evolution_chain_url: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "PokemonSpecies":
        try:
            chain = payload.get("evolution_chain") or {}
            return cls(
                name=str(payload.get("name") or ""),
                flavor_texts=tuple(
                    (_name_of(entry, "language"), str(entry["flavor_text"]))
                    for entry in payload.get("flavor_text_entries", [])
                ),
                evolution_chain_url=chain.get("url") or "",
            )
        except (KeyError, TypeError) as e:
            raise ValidationError(f"malformed pokemon species payload: {e!r}") from e

    def get_flavor_text(self, language: str = "en", must_find: bool = False) -> str:
        """
        First flavor text written in `language`, control characters replaced by spaces.

        Raises:
            SpeciesError: If no entry exists for the language and must_find is set
        """
        for lang, text in self.flavor_texts:
            if lang == language:
                return _CONTROL_CHARS.sub(" ", text)

        if must_find:
            raise SpeciesError(
                language, message=f"flavor text for language [{language}] not found!"
            )
        return ""
