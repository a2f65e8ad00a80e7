import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from rnseanomaly.config.schema import AppConfig

# (environment variable, section, key)
ENV_OVERRIDES = [
    ("REDIS_URL", "redis", "url"),
    ("RNSE_SECRET_KEY", "django", "secret_key"),
    ("RNSE_DATABASE_TYPE", "django", "database_type"),
    ("RNSE_SCORER_TYPE", "scorer", "type"),
    ("RNSE_SCORER_ENDPOINT", "scorer", "endpoint"),
    ("RNSE_STORE_TYPE", "store", "type"),
]


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """
    Load application configuration from a YAML file.
    Environment variables override the file; the file overrides defaults.

    Args:
        path: Path to config.yaml. Defaults to RNSE_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("RNSE_CONFIG_FILE", "config.yaml")
    path = Path(path)

    config_data = {}
    if path.exists():
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}") from e
        if not isinstance(config_data, dict):
            raise RuntimeError(f"Configuration in {path} must be a mapping")

    for env_var, section, key in ENV_OVERRIDES:
        value = os.getenv(env_var)
        if value:
            config_data.setdefault(section, {})[key] = value

    try:
        return AppConfig(**config_data)
    except ValidationError as e:
        raise RuntimeError(f"Invalid configuration in {path}: {e}") from e
