from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Facets:
    """
    Which sub-records to load for a pokemon.

    Attributes:
        details: Load /pokemon/{name} (images, types, stats)
        species: Load /pokemon-species/{name} (flavor text, chain URL)
        evolution_chain: Load the evolution chain; implies species, since the
            chain URL lives in the species record
    """

    details: bool = True
    species: bool = False
    evolution_chain: bool = False

    @property
    def needs_species(self) -> bool:
        return self.species or self.evolution_chain
