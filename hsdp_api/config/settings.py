"""
Configuration management for hsdp-api.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
Supports encrypted configuration values using ENC[...] syntax.

Example file::

    cdr:
      region: us-east
      environment: client-test
      root_org_id: ${HSDP_ROOT_ORG}
      cdr_url: https://cdr-stu3-sandbox.us-east.philips-healthsuite.com
      time_zone: America/New_York
      debug_log: /tmp/cdr.log

    stl:
      stl_url: https://hsdp-stl.example.org/

    signing:
      shared_key: my-shared-key
      secret_key: ENC[...]

    logging:
      level: DEBUG
      json_format: false
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from hsdp_api.exceptions import InvalidConfigurationError
from hsdp_api.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_STORE_SUFFIX = "/store/fhir/"
DEFAULT_GRAPHQL_PATH = "graphql"


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Examples:
        "${HSDP_ROOT_ORG}" -> value of HSDP_ROOT_ORG env var
        "${HSDP_REGION:us-east}" -> value of HSDP_REGION or "us-east" if not set
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _has_encrypted_values(value: Any) -> bool:
    if isinstance(value, str):
        return value.startswith("ENC[") and value.endswith("]")
    elif isinstance(value, dict):
        return any(_has_encrypted_values(v) for v in value.values())
    elif isinstance(value, list):
        return any(_has_encrypted_values(item) for item in value)
    else:
        return False


def _decrypt_config_values(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively decrypt encrypted configuration values.

    Encrypted values use the format: ENC[base64_encoded_ciphertext]
    Requires HSDP_MASTER_PASSWORD environment variable to be set.
    """
    if not _has_encrypted_values(config_data):
        return config_data

    # Lazy import keeps cryptography off the path for plain configs
    from hsdp_api.config.encryption import ConfigEncryption

    try:
        encryptor = ConfigEncryption()
        decrypted_config = encryptor.decrypt_config(config_data)
        logger.debug("Decrypted configuration values")
        return decrypted_config
    except ValueError as e:
        logger.error(f"Failed to decrypt configuration: {e}")
        raise InvalidConfigurationError(
            f"Failed to decrypt configuration: {e}. "
            "Ensure HSDP_MASTER_PASSWORD environment variable is set correctly."
        ) from e


@dataclass(frozen=True)
class CDRConfig:
    """Clinical Data Repository client configuration."""

    region: str = ""
    environment: str = ""
    root_org_id: str = ""
    cdr_url: str = ""
    fhir_store: str = ""
    time_zone: str = "UTC"
    debug_log: str = ""

    @property
    def store_url(self) -> str:
        """Explicit FHIR store URL, or the CDR URL plus the store suffix."""
        if self.fhir_store:
            return self.fhir_store
        if not self.cdr_url:
            return ""
        return self.cdr_url.rstrip("/") + DEFAULT_STORE_SUFFIX


@dataclass(frozen=True)
class STLConfig:
    """STL GraphQL client configuration."""

    region: str = ""
    environment: str = ""
    stl_url: str = ""
    graphql_path: str = DEFAULT_GRAPHQL_PATH
    debug_log: str = ""


@dataclass(frozen=True)
class SigningConfig:
    """Shared/secret key pair for HMAC request signing."""

    shared_key: str = ""
    secret_key: str = field(default="", repr=False)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass(frozen=True)
class HSDPConfig:
    """Top-level hsdp-api configuration."""

    cdr: Optional[CDRConfig] = None
    stl: Optional[STLConfig] = None
    signing: Optional[SigningConfig] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.hsdp/config.yaml")


def get_default_config() -> HSDPConfig:
    """Configuration used when no file is available: logging only."""
    return HSDPConfig(logging=LoggingConfig(level="INFO", file="", json_format=True))


def load_config(config_path: Optional[str] = None) -> HSDPConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        HSDPConfig: Loaded and validated configuration
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at top level"
        )

    config_data = _expand_env_vars(config_data)
    config_data = _decrypt_config_values(config_data)

    try:
        config = _build_config_from_dict(config_data)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    _validate_config(config)
    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    section = config_data.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> HSDPConfig:
    """
    Build HSDPConfig from dictionary loaded from YAML.

    Unknown keys inside a section raise TypeError from the dataclass
    constructor, which the loader reports as invalid configuration.
    """
    cdr_data = _section(config_data, "cdr")
    stl_data = _section(config_data, "stl")
    signing_data = _section(config_data, "signing")
    logging_data = _section(config_data, "logging") or {}

    cdr = CDRConfig(**cdr_data) if cdr_data is not None else None
    if cdr is not None and cdr.debug_log:
        cdr = CDRConfig(**{**cdr_data, "debug_log": os.path.expanduser(cdr.debug_log)})

    stl = STLConfig(**stl_data) if stl_data is not None else None
    signing = SigningConfig(**signing_data) if signing_data is not None else None

    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")),
        file=os.path.expanduser(logging_data.get("file", "") or ""),
        json_format=bool(logging_data.get("json_format", True)),
    )

    return HSDPConfig(cdr=cdr, stl=stl, signing=signing, logging=logging_config)


def _validate_config(config: HSDPConfig) -> None:
    """
    Validate configuration values.

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    if config.cdr is not None and not config.cdr.store_url:
        logger.error("Configuration validation failed: cdr requires cdr_url or fhir_store")
        raise InvalidConfigurationError("cdr section requires cdr_url or fhir_store")

    if config.stl is not None and not config.stl.stl_url:
        logger.error("Configuration validation failed: stl requires stl_url")
        raise InvalidConfigurationError("stl section requires stl_url")

    if config.signing is not None:
        if not config.signing.shared_key or not config.signing.secret_key:
            raise InvalidConfigurationError(
                "signing section requires both shared_key and secret_key"
            )
