"""
Browse PokeAPI from the command line.

Loads a number of pages through the enrichment core and prints one line per
pokemon. With --select, also prints the evolution chain of one pokemon.

Usage:
    python -m pokescroll.jobs.browse --pages 2 --width 1920
    python -m pokescroll.jobs.browse --pages 1 --select bulbasaur
"""

import argparse
import asyncio
import logging

from pokescroll.clients.pokeapi import PokeAPIClient
from pokescroll.models.errors import PokedexError
from pokescroll.models.pokemon import Pokemon
from pokescroll.services.browser import PokedexBrowser
from pokescroll.services.enrichment import EnrichmentOrchestrator
from pokescroll.services.facets import Facets

logger = logging.getLogger(__name__)


def format_row(pokemon: Pokemon) -> str:
    """One listing line: zero-padded id, name and types."""
    if not pokemon.has_details():
        return f"  ??? {pokemon.name}"
    return f"  {pokemon.id:03d} {pokemon.name} ({'/'.join(pokemon.types)})"


def format_chain(pokemon: Pokemon) -> list[str]:
    """Evolution chain lines, indented by phase."""
    if not pokemon.has_evolution_chain():
        return []
    chain = pokemon.get_evolution_chain()
    if chain.is_single():
        return [f"  {pokemon.name} does not evolve"]
    return [
        f"  {'  ' * position.phase}{position.node.name}" for position in chain.link_map()
    ]


async def run_browse(
    pages: int,
    width: int | None = None,
    species: bool = False,
    select: str | None = None,
    client: PokeAPIClient | None = None,
) -> PokedexBrowser:
    """
    Load `pages` pages, stopping early once the listing is exhausted.

    Args:
        pages: Maximum number of pages to load
        width: Viewport width used to size the first page
        species: Also load species data for every listed pokemon
        select: Name of a loaded pokemon to select afterwards
        client: Optional PokeAPI client for connection reuse

    Returns:
        The browser holding everything that was loaded
    """
    facets = Facets(details=True, species=species)

    async with client or PokeAPIClient() as api:
        browser = PokedexBrowser(EnrichmentOrchestrator(api), width=width, facets=facets)

        for _ in range(pages):
            if not browser.can_load():
                break
            await browser.load_next()
            logger.info("Loaded %d pokemon", len(browser.loaded()))

        if select:
            await browser.select(select)

    return browser


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Browse pokemon from PokeAPI")
    parser.add_argument("--pages", type=int, default=1, help="Pages to load (default: 1)")
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Viewport width in pixels, sizes the first page",
    )
    parser.add_argument(
        "--species",
        action="store_true",
        help="Also load species data for listed pokemon",
    )
    parser.add_argument("--select", default=None, help="Pokemon to select and expand")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        browser = asyncio.run(
            run_browse(args.pages, width=args.width, species=args.species, select=args.select)
        )
    except PokedexError as e:
        logger.error("It wasn't possible to load the pokemon data: %s", e)
        raise SystemExit(1) from e

    print(f"Loaded {len(browser.loaded())} pokemon:")
    for pokemon in browser.loaded():
        print(format_row(pokemon))

    selected = browser.selected()
    if selected is not None:
        print(f"\n{selected.name}: {selected.get_flavor_text()}")
        for line in format_chain(selected):
            print(line)

    if browser.is_exhausted():
        print("\nAll pokemon are loaded.")


if __name__ == "__main__":
    main()
