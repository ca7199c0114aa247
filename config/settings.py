"""
Runtime settings for ShopBot.

Values come from environment variables; the Streamlit app overlays
st.secrets on top before calling load_settings().
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """
    Immutable application settings.

    Attributes:
        gemini_api_key: Key for the primary provider (Google Gemini)
        gemini_model: Gemini model name
        anthropic_api_key: Key for the fallback provider (Anthropic Claude)
        anthropic_model: Claude model name
        catalog_path: Product catalog file (JSON or CSV)
        cart_storage_path: JSON file mirroring the cart between runs
        relevance_threshold: Minimum relevance score for a suggestion
        max_suggestions: How many suggestions to attach at most
        search_window: Recent searches kept in the user profile
        interest_window: Distinct interest categories kept in the profile
        context_turns: Turns rendered into the conversation context block
        log_dir: Directory for log files
        gsheets_spreadsheet_id: Spreadsheet for cloud turn logging
        debug_mode: Show debug details in the UI
    """
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_temperature: float = 0.7
    gemini_max_output_tokens: int = 500
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-3-haiku-20240307"
    anthropic_temperature: float = 0.4
    anthropic_max_tokens: int = 1024
    catalog_path: str = "data/products.json"
    cart_storage_path: str = ".shopbot_cart.json"
    relevance_threshold: float = 25.0
    max_suggestions: int = 3
    search_window: int = 10
    interest_window: int = 5
    context_turns: int = 6
    log_dir: str = "logs"
    gsheets_spreadsheet_id: Optional[str] = None
    debug_mode: bool = False


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def load_settings() -> Settings:
    """Build Settings from environment variables, falling back to defaults."""
    defaults = Settings()
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", defaults.gemini_model),
        gemini_temperature=_env_float("GEMINI_TEMPERATURE", defaults.gemini_temperature),
        gemini_max_output_tokens=_env_int("GEMINI_MAX_OUTPUT_TOKENS", defaults.gemini_max_output_tokens),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        anthropic_model=os.getenv("ANTHROPIC_MODEL", defaults.anthropic_model),
        anthropic_temperature=_env_float("ANTHROPIC_TEMPERATURE", defaults.anthropic_temperature),
        anthropic_max_tokens=_env_int("ANTHROPIC_MAX_TOKENS", defaults.anthropic_max_tokens),
        catalog_path=os.getenv("CATALOG_PATH", defaults.catalog_path),
        cart_storage_path=os.getenv("CART_STORAGE_PATH", defaults.cart_storage_path),
        relevance_threshold=_env_float("RELEVANCE_THRESHOLD", defaults.relevance_threshold),
        max_suggestions=_env_int("MAX_SUGGESTIONS", defaults.max_suggestions),
        search_window=_env_int("SEARCH_WINDOW", defaults.search_window),
        interest_window=_env_int("INTEREST_WINDOW", defaults.interest_window),
        context_turns=_env_int("CONTEXT_TURNS", defaults.context_turns),
        log_dir=os.getenv("LOG_DIR", defaults.log_dir),
        gsheets_spreadsheet_id=os.getenv("GSHEETS_SPREADSHEET_ID") or None,
        debug_mode=os.getenv("SHOPBOT_DEBUG", "").lower() in ("1", "true", "yes"),
    )
