# runner-tools utilities
from .config import ConfigError, get_config_value, load_config
from .logger import configure_logger, get_logger

__all__ = ['ConfigError', 'load_config', 'get_config_value', 'configure_logger', 'get_logger']
