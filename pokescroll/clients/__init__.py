from pokescroll.clients.pokeapi import PokeAPIClient

__all__ = ["PokeAPIClient"]
