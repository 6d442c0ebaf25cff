"""
ConfigManager: YAML-backed bootstrap tunables for pogoprofile.

Purpose
-------
- Provide hierarchical, dot-notation access to tunable bootstrap values
  (avatar slot ranges, starter species, codename generation).
- Back configuration with packaged YAML defaults plus optional YAML overrides
  from a host-supplied directory.
- Allow hosts and tests to pin individual values at runtime.

Key Design Decisions
--------------------
- The packaged ``pogoprofile/config/defaults.yaml`` is the single source for
  defaults; override directories only need the keys they change.
- Override files are deep-merged in sorted path order.
- Runtime overrides (``set_override``) sit on top of YAML until
  ``clear_overrides()`` is called.

Dependencies
------------
- PyYAML for parsing.
- ``pogoprofile.core.config.config.Config`` for the override directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional

import yaml

from pogoprofile.core.config.config import Config
from pogoprofile.core.config.errors import (
    ConfigInitializationError,
    ConfigValidationError,
)

# Plain stdlib logger: the structured logger module imports this package
logger = logging.getLogger(__name__)

DEFAULTS_FILE = Path(__file__).resolve().parents[2] / "config" / "defaults.yaml"


class ConfigManager:
    """
    Tunable configuration with dot-notation access.

    Examples
    --------
    >>> ConfigManager.get("codename.min_length")
    10
    >>> ConfigManager.set_override("codename.min_length", 12)
    >>> ConfigManager.get("codename.min_length")
    12
    """

    _cache: Dict[str, Any] = {}
    _overrides: Dict[str, Any] = {}
    _initialized: bool = False
    _config_dir: Optional[Path] = None

    # =========================================================================
    # YAML LOADING
    # =========================================================================

    @staticmethod
    def _deep_merge_dict(
        target: MutableMapping[str, Any],
        source: MutableMapping[str, Any],
    ) -> None:
        """Recursively merge `source` into `target` (in-place)."""
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                ConfigManager._deep_merge_dict(target[key], value)
            else:
                target[key] = value

    @classmethod
    def _load_defaults(cls) -> Dict[str, Any]:
        try:
            with DEFAULTS_FILE.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigInitializationError(
                f"Cannot read packaged defaults {DEFAULTS_FILE}: {exc}"
            ) from exc

        if not isinstance(data, dict):
            raise ConfigInitializationError(
                f"Packaged defaults {DEFAULTS_FILE} must be a mapping"
            )
        return data

    @classmethod
    def _load_override_dir(cls, config_dir: Path, target: Dict[str, Any]) -> int:
        """Deep-merge every YAML file under `config_dir` into `target`."""
        if not config_dir.exists():
            logger.warning(
                "Config override directory not found; using packaged defaults only",
                extra={"config_dir": str(config_dir)},
            )
            return 0

        yaml_files = sorted(
            list(config_dir.rglob("*.yaml")) + list(config_dir.rglob("*.yml"))
        )
        loaded_count = 0

        for yaml_file in yaml_files:
            try:
                with yaml_file.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle)
            except (OSError, yaml.YAMLError) as exc:
                logger.warning(
                    "Failed to load YAML config",
                    extra={
                        "file": str(yaml_file),
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                continue

            if isinstance(data, dict):
                cls._deep_merge_dict(target, data)
                loaded_count += 1
                logger.debug("Loaded YAML config", extra={"file": str(yaml_file)})
            elif data is not None:
                logger.warning(
                    "Ignoring non-dict YAML root object",
                    extra={
                        "file": str(yaml_file),
                        "root_type": type(data).__name__,
                    },
                )

        return loaded_count

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    @classmethod
    def initialize(cls, config_dir: Optional[Path] = None) -> None:
        """
        Load packaged defaults and YAML overrides (idempotent per directory).

        Parameters
        ----------
        config_dir:
            Directory of YAML overrides. Falls back to ``Config.CONFIG_DIR``.
        """
        config_dir = config_dir or Config.CONFIG_DIR
        if cls._initialized and config_dir == cls._config_dir:
            return

        merged = cls._load_defaults()

        override_count = 0
        if config_dir is not None:
            override_count = cls._load_override_dir(config_dir, merged)

        cls._cache = merged
        cls._config_dir = config_dir
        cls._initialized = True

        logger.info(
            "ConfigManager initialized",
            extra={
                "defaults_file": str(DEFAULTS_FILE),
                "override_files": override_count,
                "runtime_overrides": len(cls._overrides),
            },
        )

    # =========================================================================
    # READS
    # =========================================================================

    @staticmethod
    def _resolve(source: Dict[str, Any], key: str) -> Any:
        value: Any = source
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]
        return value

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value by dot-notation path.

        Runtime overrides win over YAML overrides, which win over packaged
        defaults. Returns ``default`` if the key is absent everywhere.
        """
        if key in cls._overrides:
            return cls._overrides[key]

        if not cls._initialized:
            cls.initialize()

        value = cls._resolve(cls._cache, key)
        return default if value is None else value

    @classmethod
    def get_int(cls, key: str, default: Optional[int] = None) -> int:
        """Retrieve an integer value, raising if it is missing or mistyped."""
        value = cls.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValidationError(
                f"Config key '{key}' must be an integer, got {value!r}"
            )
        return value

    @classmethod
    def get_mapping(cls, key: str) -> Dict[str, Any]:
        """Retrieve a non-empty mapping value."""
        value = cls.get(key)
        if not isinstance(value, dict) or not value:
            raise ConfigValidationError(
                f"Config key '{key}' must be a non-empty mapping, got {value!r}"
            )
        return dict(value)

    # =========================================================================
    # RUNTIME OVERRIDES
    # =========================================================================

    @classmethod
    def set_override(cls, key: str, value: Any) -> None:
        """Pin a value for `key` on top of all YAML sources."""
        cls._overrides[key] = value
        logger.debug(
            "Config override set",
            extra={"config_key": key, "value": value},
        )

    @classmethod
    def clear_overrides(cls) -> None:
        """Drop every runtime override."""
        cls._overrides.clear()


__all__ = ["ConfigManager"]
