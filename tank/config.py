from typing import Dict

import yaml

from .exceptions import ConfigError


def load_config(path) -> Dict[str, str]:
    """
    Loads the variables file used to seed the global scope of every template.

    The file is YAML (plain JSON files load as well) holding a flat mapping
    of names to scalars. Values are kept as text, like every symbol value.
    """
    try:
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to open config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of names to values")

    variables = {}
    for key, value in cfg.items():
        if isinstance(value, (dict, list)):
            raise ConfigError(f"Config value for '{key}' must be a single value")
        variables[str(key)] = to_text(value)
    return variables


def to_text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
