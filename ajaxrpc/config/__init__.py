"""Configuration module for ajaxrpc."""

from ajaxrpc.config.loader import load_config, get_config_path, save_config
from ajaxrpc.config.schema import Config, LoggingConfig, ServerConfig

__all__ = ["Config", "LoggingConfig", "ServerConfig", "load_config", "get_config_path", "save_config"]
