from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PokeScroll"
    debug: bool = False

    api_base_url: str = "https://pokeapi.co/api/v2"

    # Applies to every upstream GET; the enrichment layer has no timeout of its own
    request_timeout: float = 30.0

    user_agent: str = "PokeScroll/1.0"

    # Page size used after the first (resolution-dependent) page
    page_step: int = 20


settings = Settings()


# =============================================================================
# INITIAL PAGE SIZE
# =============================================================================

# (minimum viewport width, rows to load first), checked top to bottom
RESOLUTION_STEPS: tuple[tuple[int, int], ...] = (
    (3400, 60),
    (3000, 40),
    (1801, 30),
)

DEFAULT_RESOLUTION_STEP = 20


# =============================================================================
# STAT DISPLAY LIMITS
# =============================================================================

# Highest individual base stat of any pokemon
MAX_INDIVIDUAL_STAT = 300

# Highest base stat total of any pokemon
MAX_TOTAL_STAT = 1300
