"""
PokeScroll.

Paginated PokeAPI browser core: lists pokemon page by page and enriches
them with details, species and evolution chain data.
"""
