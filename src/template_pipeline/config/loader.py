"""
Configuration loading from files and environment variables.
"""
import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .configuration import RendererConfiguration, ensure_renderer_config
from ..error.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPLATE_PIPELINE_"
DEFAULT_CONFIG_NAMES = ["template_pipeline.yaml", "template_pipeline.yml", "template_pipeline.json"]


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a file (YAML or JSON).

    Args:
        file_path: Path to the configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If the file is not found or cannot be parsed
    """
    path = Path(file_path).expanduser()

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {file_path}: {e}") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            loaded_config = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            loaded_config = json.loads(content) or {}
        else:
            raise ConfigurationError(f"Unsupported config file format: {file_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format in {file_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON format in {file_path}: {e}") from e

    if not isinstance(loaded_config, dict):
        raise ConfigurationError(f"Configuration in {file_path} must be a mapping")

    logger.debug(f"Loaded configuration from {file_path}")
    return loaded_config


def find_default_config(search_paths: Optional[List[str]] = None) -> Optional[str]:
    """
    Find a configuration file in the standard locations.

    Returns:
        Path of the first configuration file found, or None
    """
    for directory in search_paths or [os.getcwd()]:
        for filename in DEFAULT_CONFIG_NAMES:
            candidate = Path(directory) / filename
            if candidate.is_file():
                return str(candidate)
    return None


def load_configuration_from_env(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """
    Collect configuration from environment variables.

    ``TEMPLATE_PIPELINE_LIVE_RELOAD=true`` becomes ``{"live_reload": True}``.
    Values are parsed as YAML scalars so booleans and numbers keep their type.
    """
    config = {}
    for key, raw in os.environ.items():
        if not key.startswith(prefix):
            continue
        name = key[len(prefix):].lower()
        if name not in RendererConfiguration.model_fields:
            logger.debug(f"Ignoring unknown environment setting {key}")
            continue
        try:
            config[name] = yaml.safe_load(raw) if raw else raw
        except yaml.YAMLError:
            config[name] = raw
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and key in result and isinstance(result[key], dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config(
    config_path: Optional[str] = None,
    env_prefix: str = ENV_PREFIX,
    **overrides: Any
) -> RendererConfiguration:
    """
    Load configuration from defaults, a file, the environment and overrides.

    Args:
        config_path: Path to the configuration file; discovered when omitted
        env_prefix: Prefix for environment variables to consider
        **overrides: Settings with the highest precedence

    Returns:
        RendererConfiguration object with loaded configuration
    """
    config: Dict[str, Any] = {}

    path = config_path or find_default_config()
    if path:
        logger.info(f"Loading configuration from {path}")
        config = merge_configs(config, load_config_file(path))
    else:
        logger.debug("No configuration file found, using defaults and environment variables")

    config = merge_configs(config, load_configuration_from_env(env_prefix))
    return ensure_renderer_config(config, **overrides)
