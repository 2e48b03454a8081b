from pokescroll.api.health import router as health_router
from pokescroll.api.pokemon import router as pokemon_router

__all__ = [
    "health_router",
    "pokemon_router",
]
