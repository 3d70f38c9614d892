"""
CLI Configuration

Locates the configuration file, overlays environment variables and
opens the persistent accumulator the stateful commands work on.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.mmr.engine import MerkleMountainRange
from core.mmr.factory import create_accumulator


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATHS = (
    Path("mmr.yaml"),
    Path(".mmr.yaml"),
    Path.home() / ".config" / "mmr" / "config.yaml",
)


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit
    path the first existing default location is used.
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                logger.debug("Using config file %s", default_path)
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def open_accumulator(config: RuntimeConfig) -> MerkleMountainRange:
    """
    Open the journal-backed accumulator named by ``config``.

    CLI invocations are separate processes, so state always goes through
    the journal even when the config selects the memory backend.
    """
    if config.store.backend != "journal":
        config = copy.deepcopy(config)
        config.store.backend = "journal"
    return create_accumulator(config)
