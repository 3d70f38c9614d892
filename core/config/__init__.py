"""
Runtime Configuration Module

Provides configuration loading and management for the accumulator.
"""

from .runtime import (
    RuntimeConfig,
    HasherConfig,
    StoreConfig,
    EngineConfig,
    LoggingConfig,
    get_default_config_template,
)

__all__ = [
    "RuntimeConfig",
    "HasherConfig",
    "StoreConfig",
    "EngineConfig",
    "LoggingConfig",
    "get_default_config_template",
]
