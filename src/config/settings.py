"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables**: e.g., SCRAPE_DELAY=5
#   2. **.env file**: key=value lines in the project root .env file
#
# Field name `scrape_delay` maps to env var `SCRAPE_DELAY`.  Defaults below
# apply when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Archive scraper settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Archive ===
    archive_base_url: str = "https://j-archive.com"
    # Seconds between two requests to the archive, across all workers.
    scrape_delay: float = 2.0
    request_timeout: float = 15.0
    # Game pages fetched in parallel by `games` / `scrape_games`.
    max_concurrency: int = 2

    # === Storage ===
    catalog_path: str = "data/games_list.json"
    games_dir: str = "data/games"

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
