"""
Configuration module for the report engine.
"""
from .settings import (
    CrewTimeConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'CrewTimeConfig',
    'get_config',
    'load_config',
    'reload_config'
]
