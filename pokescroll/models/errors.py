"""
Error taxonomy for the enrichment core.

Transport failures surface as RequestError. The orchestrator wraps them
into DetailsError / SpeciesError at its boundary; the evolution resolver is
the only place that recovers locally (DetailsError on a chain participant).
"""


class PokedexError(Exception):
    """Base class for all pokescroll errors."""

    pass


class RequestError(PokedexError):
    """
    Raised when an upstream GET fails.

    Covers network failures, non-2xx responses and undecodable bodies.
    `not_found` distinguishes HTTP 404, which the species retry policy
    branches on.
    """

    def __init__(self, url: str, status_code: int | None = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        message = f"Request to {url} failed"
        if status_code is not None:
            message += f": HTTP {status_code}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class DetailsError(PokedexError):
    """Raised when the details sub-record is missing or cannot be fetched."""

    def __init__(self, name: str, message: str | None = None, not_found: bool = False):
        self.name = name
        self.not_found = not_found
        super().__init__(message or f"unable to find details for pokemon [{name}]")


class SpeciesError(PokedexError):
    """Raised when the species sub-record is missing or cannot be fetched."""

    def __init__(self, name: str, message: str | None = None, forced_name: str | None = None):
        self.name = name
        self.forced_name = forced_name
        if message is None:
            message = f"unable to find species data for pokemon [{name}]"
            if forced_name is not None:
                message += f" (forced {forced_name})"
        super().__init__(message)


class EvolutionChainError(PokedexError):
    """Raised when a pokemon has no evolution chain attached."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"pokemon [{name}] has no evolution chain loaded!")


class SelectionError(PokedexError):
    """Raised when selecting a pokemon that was never loaded."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Pokemon of id [{name}] wasn't previously loaded!")


class NotFoundError(PokedexError):
    """Raised by registry lookups for unknown names."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"pokemon [{name}] is not in the registry")


class ValidationError(PokedexError):
    """Raised when a sub-record does not fit the pokemon it is attached to."""

    pass


class PaginationError(PokedexError):
    """Raised when a page is requested while another is still in flight."""

    pass
