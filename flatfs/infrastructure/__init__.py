"""FlatFS Infrastructure Layer.

Services used by the stores and the application layer:
- Logger: Structured logging system
- ConfigManager: Hierarchical YAML configuration
"""

from .config_manager import ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import ConfigSource, ConfigValue, get_config_manager, set_global_config
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigValue",
    "ConfigError",
    "Config",
    "get_config_manager",
    "set_global_config",
]
