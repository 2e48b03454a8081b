"""
Pokemon API endpoints.

JSON view of the browsing controller: the loaded list, loading the next
page, and selecting a pokemon to see its species and evolution chain.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from pokescroll.models.errors import PaginationError, PokedexError, SelectionError
from pokescroll.models.pokemon import Pokemon
from pokescroll.models.stats import stat_proportions
from pokescroll.services.browser import PokedexBrowser

router = APIRouter(prefix="/pokemon", tags=["pokemon"])


def get_browser(request: Request) -> PokedexBrowser:
    """The browser created by the application lifespan."""
    return request.app.state.browser


BrowserDep = Annotated[PokedexBrowser, Depends(get_browser)]


class PokemonSummary(BaseModel):
    """A list row. Detail fields are None until details are loaded."""

    name: str
    id: int | None = None
    types: list[str] = Field(default_factory=list)
    front_sprite: str | None = None
    official_artwork: str | None = None


class EvolutionStage(BaseModel):
    """One node of an evolution chain, in pre-order."""

    name: str
    phase: int
    phase_index: int
    sibling_count: int
    id: int | None = None
    official_artwork: str | None = None


class PokemonDetailResponse(PokemonSummary):
    """Everything known about a selected pokemon."""

    weight: int | None = None
    back_sprite: str | None = None
    abilities: list[str] = Field(default_factory=list)
    stats: dict[str, int] = Field(default_factory=dict)
    stat_proportions: dict[str, float] = Field(default_factory=dict)
    flavor_text: str = ""
    evolution: list[EvolutionStage] = Field(default_factory=list)
    single_stage: bool = True


class PokemonListResponse(BaseModel):
    """Response model for the loaded list."""

    pokemon: list[PokemonSummary]
    count: int
    exhausted: bool


def _summary(pokemon: Pokemon) -> PokemonSummary:
    if not pokemon.has_details():
        return PokemonSummary(name=pokemon.name)
    return PokemonSummary(
        name=pokemon.name,
        id=pokemon.id,
        types=list(pokemon.types),
        front_sprite=pokemon.front_sprite,
        official_artwork=pokemon.official_artwork,
    )


def _detail(pokemon: Pokemon) -> PokemonDetailResponse:
    response = PokemonDetailResponse(**_summary(pokemon).model_dump())

    if pokemon.has_details():
        response.weight = pokemon.weight
        response.back_sprite = pokemon.back_sprite
        response.abilities = list(pokemon.abilities)
        response.stats = pokemon.stats
        response.stat_proportions = stat_proportions(pokemon)

    if pokemon.has_species():
        response.flavor_text = pokemon.get_flavor_text()

    if pokemon.has_evolution_chain():
        chain = pokemon.get_evolution_chain()
        response.single_stage = chain.is_single()
        for position in chain.link_map():
            stage = position.node.pokemon
            response.evolution.append(
                EvolutionStage(
                    name=stage.name,
                    phase=position.phase,
                    phase_index=position.phase_index,
                    sibling_count=position.sibling_count,
                    id=stage.id if stage.has_details() else None,
                    official_artwork=stage.official_artwork if stage.has_details() else None,
                )
            )

    return response


def _list_response(browser: PokedexBrowser) -> PokemonListResponse:
    rows = [_summary(p) for p in browser.loaded()]
    return PokemonListResponse(pokemon=rows, count=len(rows), exhausted=browser.is_exhausted())


@router.get("", response_model=PokemonListResponse)
async def list_loaded(browser: BrowserDep) -> PokemonListResponse:
    """Every pokemon loaded so far, in listing order."""
    return _list_response(browser)


@router.post("/load", response_model=PokemonListResponse)
async def load_next_page(browser: BrowserDep) -> PokemonListResponse:
    """
    Load the next page.

    Returns 409 while another page is loading and 502 if PokeAPI fails.
    Once every pokemon is loaded this is a no-op.
    """
    try:
        await browser.load_next()
    except PaginationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except PokedexError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"It wasn't possible to load the pokemon data: {e}",
        ) from e

    return _list_response(browser)


@router.get("/selected", response_model=PokemonDetailResponse)
async def get_selected(browser: BrowserDep) -> PokemonDetailResponse:
    """The selected pokemon. Returns 404 if nothing is selected."""
    pokemon = browser.selected()
    if pokemon is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No pokemon selected")
    return _detail(pokemon)


@router.post("/{name}/select", response_model=PokemonDetailResponse)
async def select_pokemon(name: str, browser: BrowserDep) -> PokemonDetailResponse:
    """
    Select a loaded pokemon and load its species and evolution chain.

    Returns 404 if the pokemon was never loaded.
    """
    try:
        pokemon = await browser.select(name)
    except SelectionError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except PokedexError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return _detail(pokemon)
