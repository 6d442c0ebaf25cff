"""
Configuration error hierarchy for pogoprofile.

Exception Hierarchy
-------------------
ConfigError (base)
├── ConfigValidationError (type/shape validation failures)
└── ConfigInitializationError (YAML loading failures)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     ConfigManager.initialize(config_dir=Path("missing"))
    ... except ConfigError as e:
    ...     logger.error(f"Config operation failed: {e}")
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Raised when a configuration value has the wrong type or shape.

    Example
    -------
    >>> ConfigManager.get_int("avatar.ranges.any")
    Traceback (most recent call last):
    ConfigValidationError: ...
    """
    pass


class ConfigInitializationError(ConfigError):
    """
    Raised when ConfigManager initialization fails.

    This is raised when the packaged defaults cannot be read or are not a
    mapping. Broken override files are logged and skipped instead.
    """
    pass


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigInitializationError",
]
