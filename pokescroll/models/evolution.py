"""
Evolution chain tree.

Nodes are stored flat in an arena and reference each other by index, so
the tree holds no cyclic object references. Each node owns one Pokemon
that can be swapped for a richer instance once it has been fetched.

Reference: https://pokeapi.co/docs/v2#evolution-chains
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pokescroll.models.errors import ValidationError
from pokescroll.models.pokemon import Pokemon


@dataclass
class EvolutionNode:
    """
    One position in an evolution chain.

    Attributes:
        index: Position of this node in the chain's arena
        pokemon: The pokemon at this position (replaceable)
        parent: Arena index of the previous stage, None for the root
        children: Arena indices of the direct evolutions, in API order
    """

    index: int
    pokemon: Pokemon
    parent: int | None = None
    children: list[int] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.pokemon.name

    def set_pokemon(self, pokemon: Pokemon) -> None:
        self.pokemon = pokemon


@dataclass(frozen=True)
class LinkPosition:
    """
    Where a node sits in the chain layout.

    Attributes:
        node: The node being visited
        phase: Depth from the root (root is phase 0)
        phase_index: Position among the parent's children
        sibling_count: Number of children of the parent (1 for the root)
    """

    node: EvolutionNode
    phase: int
    phase_index: int
    sibling_count: int


class EvolutionChain:
    """A rooted evolution tree parsed from an /evolution-chain/{id} payload."""

    def __init__(self, chain_id: int | None = None, base_url: str | None = None) -> None:
        self.id = chain_id
        self._base_url = base_url
        self._nodes: list[EvolutionNode] = []

    @classmethod
    def from_api(cls, payload: dict[str, Any], base_url: str | None = None) -> "EvolutionChain":
        """
        Parse the nested chain payload.

        Child entries without a species name are skipped.

        Raises:
            ValidationError: If the root link is missing or has no species
        """
        root = payload.get("chain") if isinstance(payload, dict) else None
        if not isinstance(root, dict) or _species_name(root) is None:
            raise ValidationError("evolution chain payload has no root species")

        chain = cls(payload.get("id"), base_url=base_url)
        chain._make_chain(root, None)
        return chain

    def _make_chain(self, level: dict[str, Any], parent: int | None) -> None:
        name = _species_name(level)
        if name is None:
            return

        node = EvolutionNode(
            index=len(self._nodes),
            pokemon=Pokemon.make(name, base_url=self._base_url),
            parent=parent,
        )
        self._nodes.append(node)
        if parent is not None:
            self._nodes[parent].children.append(node.index)

        for child in level.get("evolves_to") or []:
            if isinstance(child, dict):
                self._make_chain(child, node.index)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[EvolutionNode]:
        return iter(self._nodes)

    @property
    def root(self) -> EvolutionNode:
        return self._nodes[0]

    def node(self, index: int) -> EvolutionNode:
        return self._nodes[index]

    def children_of(self, node: EvolutionNode) -> list[EvolutionNode]:
        return [self._nodes[i] for i in node.children]

    def is_single(self) -> bool:
        """True when the species family has no evolutions at all."""
        return not self.root.children

    def link_map(self) -> list[LinkPosition]:
        """Pre-order layout of every node in the chain."""
        positions: list[LinkPosition] = []
        self._on_link_map(self.root, 0, 0, 1, positions)
        return positions

    def _on_link_map(
        self,
        node: EvolutionNode,
        phase: int,
        phase_index: int,
        sibling_count: int,
        positions: list[LinkPosition],
    ) -> None:
        positions.append(LinkPosition(node, phase, phase_index, sibling_count))
        children = self.children_of(node)
        for i, child in enumerate(children):
            self._on_link_map(child, phase + 1, i, len(children), positions)


def _species_name(level: dict[str, Any]) -> str | None:
    species = level.get("species")
    if isinstance(species, dict) and species.get("name"):
        return str(species["name"])
    return None
