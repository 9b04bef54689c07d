"""
Config File module.

This module is part of the Mail Admin Panel project.
"""

# config_file.py
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'MAILADMIN_CONFIG'

Source = Union[None, str, os.PathLike, Mapping[str, Any]]


def read_source(source: Source = None) -> Dict[str, Any]:
    """
    Return the operator overrides named by ``source``.

    A mapping is used as is, a path is parsed as YAML or JSON, and ``None``
    falls back to the file named by the MAILADMIN_CONFIG environment variable
    (or no overrides at all when it is unset).
    """
    if source is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            logger.info("%s is not set, using built-in defaults only", CONFIG_ENV_VAR)
            return {}
        source = env_path

    if isinstance(source, Mapping):
        return dict(source)

    return read_file(source)


def read_file(path: Union[str, os.PathLike]) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_path}", details={'path': str(config_path)})

    suffix = config_path.suffix.lower()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                loaded = json.load(f)
            elif suffix in ('.yml', '.yaml'):
                loaded = yaml.safe_load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported configuration file format: {suffix or '(none)'}",
                    details={'path': str(config_path)},
                )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot parse configuration file {config_path}: {e}",
            details={'path': str(config_path)},
        ) from e

    if loaded is None:
        logger.warning("Configuration file %s is empty", config_path)
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping of settings, "
            f"not {type(loaded).__name__}",
            details={'path': str(config_path)},
        )

    logger.info("Read %d settings from %s", len(loaded), config_path)
    return loaded


def describe_source(source: Source) -> Optional[str]:
    if source is None:
        return os.getenv(CONFIG_ENV_VAR) or None
    if isinstance(source, Mapping):
        return '<mapping>'
    return str(source)
