"""
Runtime Configuration

Central configuration for hasher selection, node store backend, engine
options and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "MMR_"

STORE_BACKENDS = ("memory", "journal")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class HasherConfig:
    """Configuration for the hash scheme."""
    name: str = "keccak"


@dataclass
class StoreConfig:
    """Configuration for the node store."""
    backend: str = "memory"
    path: str = "mmr.jsonl"
    fsync: bool = False

    def __post_init__(self):
        if self.backend not in STORE_BACKENDS:
            raise ConfigurationException(
                f"Unknown store backend '{self.backend}', expected one of {list(STORE_BACKENDS)}",
                details={"backend": self.backend},
            )


@dataclass
class EngineConfig:
    """Configuration for the MMR engine."""
    allow_internal_proofs: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the accumulator.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hasher: HasherConfig = field(default_factory=HasherConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MMR_HASHER: Hasher name (keccak, sha256)
        - MMR_STORE_BACKEND: memory or journal
        - MMR_STORE_PATH: Journal file path
        - MMR_STORE_FSYNC: fsync after each append (true/false)
        - MMR_ALLOW_INTERNAL_PROOFS: Allow proofs of internal nodes (true/false)
        - MMR_LOG_LEVEL: Log level
        - MMR_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASHER"):
            overrides.setdefault("hasher", {})["name"] = os.getenv(f"{ENV_PREFIX}HASHER")

        if os.getenv(f"{ENV_PREFIX}STORE_BACKEND"):
            overrides.setdefault("store", {})["backend"] = os.getenv(f"{ENV_PREFIX}STORE_BACKEND")
        if os.getenv(f"{ENV_PREFIX}STORE_PATH"):
            overrides.setdefault("store", {})["path"] = os.getenv(f"{ENV_PREFIX}STORE_PATH")
        if os.getenv(f"{ENV_PREFIX}STORE_FSYNC"):
            overrides.setdefault("store", {})["fsync"] = _env_flag(f"{ENV_PREFIX}STORE_FSYNC")

        if os.getenv(f"{ENV_PREFIX}ALLOW_INTERNAL_PROOFS"):
            overrides.setdefault("engine", {})["allow_internal_proofs"] = _env_flag(
                f"{ENV_PREFIX}ALLOW_INTERNAL_PROOFS"
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file must contain a mapping: {path}",
                details={"path": str(path)},
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        try:
            hasher = HasherConfig(**(data.get("hasher") or {}))
            store = StoreConfig(**(data.get("store") or {}))
            engine = EngineConfig(**(data.get("engine") or {}))
            logging_config = LoggingConfig(**(data.get("logging") or {}))
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(
            hasher=hasher,
            store=store,
            engine=engine,
            logging=logging_config,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)
        # Re-run section validation
        new_config.store = StoreConfig(**vars(new_config.store))
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hasher": {
                "name": self.hasher.name,
            },
            "store": {
                "backend": self.store.backend,
                "path": self.store.path,
                "fsync": self.store.fsync,
            },
            "engine": {
                "allow_internal_proofs": self.engine.allow_internal_proofs,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


def get_default_config_template() -> str:
    """Get a template YAML configuration file."""
    return """# MMR accumulator configuration
hasher:
  name: keccak          # keccak | sha256
store:
  backend: journal      # memory | journal
  path: mmr.jsonl
  fsync: false
engine:
  allow_internal_proofs: false
logging:
  level: INFO
  file: null
"""
