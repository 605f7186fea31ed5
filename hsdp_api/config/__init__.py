"""
Configuration management for hsdp-api.

Handles loading and validation of configuration files.
"""

from hsdp_api.config.settings import (
    CDRConfig,
    HSDPConfig,
    LoggingConfig,
    SigningConfig,
    STLConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "CDRConfig",
    "HSDPConfig",
    "LoggingConfig",
    "SigningConfig",
    "STLConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
