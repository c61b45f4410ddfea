"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  : static defaults checked into the repo
                           (LLM sampling parameters, prompt tuning)
  2. .env file           : local developer overrides (not committed)
  3. Environment vars    : set at deploy time

``load_config`` reads the YAML file first, then deep-merges the
environment-derived values from :class:`Settings` on top, so a deployment
can override any key without editing the YAML.
"""

from pathlib import Path

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

_DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(path: str = _DEFAULT_CONFIG_PATH, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not
              an error; the env-derived section is returned on its own.
        settings: Settings to merge in.  Built from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Invalid YAML in {config_path}: {exc}") from exc
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
            "default_locale": settings.default_locale,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
            "timeout_seconds": settings.llm_timeout_seconds,
        },
        "images": {
            "trefle_per_category_limit": settings.trefle_per_category_limit,
            "wikipedia_limit": settings.wikipedia_image_limit,
            "cache_ttl": settings.image_cache_ttl,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
