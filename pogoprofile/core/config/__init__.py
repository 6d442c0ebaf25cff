"""
Configuration subsystem for pogoprofile.

- **config.py**: Static configuration from environment variables (.env aware)
- **manager.py**: YAML-backed tunables with dot-notation access
- **errors.py**: Configuration exception hierarchy

Usage
-----
```python
from pogoprofile.core.config import Config, ConfigManager

max_attempts = Config.CODENAME_MAX_ATTEMPTS
skin_choices = ConfigManager.get_int("avatar.ranges.any.skin")
```
"""

from pogoprofile.core.config.config import Config
from pogoprofile.core.config.errors import (
    ConfigError,
    ConfigInitializationError,
    ConfigValidationError,
)
from pogoprofile.core.config.manager import ConfigManager

__all__ = [
    "Config",
    "ConfigManager",
    "ConfigError",
    "ConfigInitializationError",
    "ConfigValidationError",
]
