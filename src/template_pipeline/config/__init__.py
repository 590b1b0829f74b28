"""
Configuration package for the template pipeline.
"""
from .configuration import RendererConfiguration, ensure_renderer_config, COLLISION_POLICIES
from .loader import (
    load_config,
    load_config_file,
    load_configuration_from_env,
    find_default_config,
    merge_configs
)

__all__ = [
    'RendererConfiguration',
    'ensure_renderer_config',
    'COLLISION_POLICIES',
    'load_config',
    'load_config_file',
    'load_configuration_from_env',
    'find_default_config',
    'merge_configs'
]
