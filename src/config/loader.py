"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is resolved in layers (later layers win):
#
#   1. Field defaults      : src/config/settings.py
#   2. config/config.yaml  : repo-wide defaults for scrape runs
#   3. .env file           : local overrides (not committed)
#   4. Environment vars    : set by whoever runs the scraper
#
# load_settings() is what the CLI uses; load_config() returns the same
# values as a nested dict shaped like config.yaml.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/config.yaml"

# (section, key) in config.yaml -> Settings field
_YAML_FIELDS: dict[tuple[str, str], str] = {
    ("app", "env"): "app_env",
    ("archive", "base_url"): "archive_base_url",
    ("archive", "scrape_delay"): "scrape_delay",
    ("archive", "request_timeout"): "request_timeout",
    ("archive", "max_concurrency"): "max_concurrency",
    ("storage", "catalog_path"): "catalog_path",
    ("storage", "games_dir"): "games_dir",
    ("logging", "level"): "log_level",
}


def read_yaml(path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Read a YAML config file; a missing file is an empty config."""
    config_path = Path(path)
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return data


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """Build Settings with config.yaml values under environment overrides.

    A YAML value is applied only to fields that neither the environment nor
    ``.env`` set.
    """
    yaml_config = read_yaml(path)
    from_environment = Settings()

    yaml_values: dict = {}
    for (section, key), field_name in _YAML_FIELDS.items():
        section_values = yaml_config.get(section)
        if isinstance(section_values, dict) and key in section_values:
            if field_name not in from_environment.model_fields_set:
                yaml_values[field_name] = section_values[key]

    if not yaml_values:
        return from_environment
    return Settings(**yaml_values)


def load_config(path: str = DEFAULT_CONFIG_PATH, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with the resolved Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built Settings; resolved via :func:`load_settings`
            when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    yaml_config = read_yaml(path)
    settings = settings or load_settings(path)

    resolved: dict = {}
    for (section, key), field_name in _YAML_FIELDS.items():
        resolved.setdefault(section, {})[key] = getattr(settings, field_name)

    _deep_merge(yaml_config, resolved)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
