"""
Logging setup used by the command line front end.
"""
from .config import LogConfig, JsonFormatter

__all__ = ['LogConfig', 'JsonFormatter']
