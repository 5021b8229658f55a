import json
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml

from utils.errors import ConfigError

# Regex for environment variable substitution
ENV_VAR_MATCHER = re.compile(r"\$\{(\w+)\}")


class EnvVarLoader(yaml.SafeLoader):
    """SafeLoader that substitutes ${VAR_NAME} scalars from the environment."""


def _env_var_constructor(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    """
    Custom YAML constructor to substitute environment variables.
    e.g., ${VAR_NAME} will be replaced by the value of the VAR_NAME environment variable.
    """
    value = loader.construct_scalar(node)
    match = ENV_VAR_MATCHER.match(value)
    if not match:
        return value

    env_var = match.group(1)
    replacement = os.getenv(env_var)
    if replacement is None:
        raise ConfigError(f"Environment variable '{env_var}' not found for substitution in config.")

    return replacement


EnvVarLoader.add_constructor("!env", _env_var_constructor)
EnvVarLoader.add_implicit_resolver("!env", ENV_VAR_MATCHER, None)


def load_config(path: Path) -> Dict[str, Any]:
    """
    Loads a JSON or YAML configuration file, chosen by its suffix.

    Args:
        path: Path of the configuration file.

    Returns:
        A dictionary containing the configuration.

    Raises:
        ConfigError: If the file cannot be read, parsed, or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                config = yaml.load(f, Loader=EnvVarLoader)
            else:
                config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read configuration {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML configuration: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration {path} must contain an object, got {type(config).__name__}.")
    return config
