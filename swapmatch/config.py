from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

TradeCountMode = Literal["existence", "maximum"]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "SwapMatch"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/swapmatch"

    # "existence": each wanted card the candidate can supply counts once if
    # any reciprocal gift exists. "maximum": number of disjoint 1:1 trades.
    trade_count_mode: TradeCountMode = "existence"

    # When True, an unknown requestor raises RequestorNotFoundError (404)
    # instead of yielding an empty match list.
    strict_requestor_lookup: bool = False


settings = Settings()


# =============================================================================
# COMPATIBILITY SCORE BOUNDS
# =============================================================================

MIN_COMPATIBILITY = 0
MAX_COMPATIBILITY = 100
