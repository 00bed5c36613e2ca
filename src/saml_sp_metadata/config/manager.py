"""Configuration loading for the sp-metadata tool.

Settings are read from a JSON file, then overridden by SP_METADATA_*
environment variables (a .env file is honored), and finally validated by
the pydantic models in config.schema. Command-line options are applied on
top of the result by the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from saml_sp_metadata.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from saml_sp_metadata.config.schema import (
    CertificatesConfig,
    Config,
    LoggingConfig,
    ServiceProviderSettings,
)
from saml_sp_metadata.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "SP_METADATA_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load and validate configuration.

    Precedence, highest first: environment variables, the JSON file, the
    built-in defaults. A missing file is not an error.

    Args:
        config_path: JSON configuration file (default: config/config.json)

    Returns:
        Validated Config

    Raises:
        ConfigurationError: If the file is unreadable, is not a JSON object,
            or fails schema validation

    Example:
        >>> config = load_config(Path("config/sp.json"))
        >>> config.service_provider.issuer
        'https://sp.example.com/metadata'
    """
    load_dotenv()

    config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else config_path
    config_dict = _apply_env_overrides(_load_config_file(config_path))
    _check_sensitive_values(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed for {config_path}:\n{e}"
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        logger.info(f"No config file at {config_path}, using defaults")
        # Deep copy so overrides never touch DEFAULT_CONFIG
        return json.loads(json.dumps(DEFAULT_CONFIG))

    try:
        config_dict = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file {config_path} "
            f"(line {e.lineno}, column {e.colno}): {e.msg}"
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a JSON object at the top level"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with SP_METADATA_ prefix.

    Environment variables follow the pattern: SP_METADATA_<FIELD>
    For example: SP_METADATA_ISSUER, SP_METADATA_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied
    """
    config_dict = _apply_service_provider_env_overrides(config_dict)
    config_dict = _apply_certificate_env_overrides(config_dict)

    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_secrets := os.getenv(f"{ENV_PREFIX}REDACT_SECRETS"):
        config_dict.setdefault("logging", {})["redact_secrets"] = _parse_bool(
            redact_secrets
        )
        logger.debug("Override: redact_secrets from environment")

    if pretty_print := os.getenv(f"{ENV_PREFIX}PRETTY_PRINT"):
        config_dict.setdefault("output", {})["pretty_print"] = _parse_bool(
            pretty_print
        )
        logger.debug("Override: pretty_print from environment")

    if output_path := os.getenv(f"{ENV_PREFIX}OUTPUT_PATH"):
        config_dict.setdefault("output", {})["output_path"] = output_path
        logger.debug("Override: output_path from environment")

    return config_dict


def _apply_service_provider_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply service provider overrides (SP_METADATA_ISSUER, SP_METADATA_CALLBACK_URL, ...)."""
    overrides = {
        "issuer": os.getenv(f"{ENV_PREFIX}ISSUER"),
        "callback_url": os.getenv(f"{ENV_PREFIX}CALLBACK_URL"),
        "logout_callback_url": os.getenv(f"{ENV_PREFIX}LOGOUT_CALLBACK_URL"),
        "identifier_format": os.getenv(f"{ENV_PREFIX}IDENTIFIER_FORMAT"),
    }
    for field_name, value in overrides.items():
        if value:
            sp_section = config_dict.get("service_provider") or {}
            sp_section[field_name] = value
            config_dict["service_provider"] = sp_section
            logger.debug(f"Override: {field_name} from environment")

    if want_signed := os.getenv(f"{ENV_PREFIX}WANT_ASSERTIONS_SIGNED"):
        sp_section = config_dict.get("service_provider") or {}
        sp_section["want_assertions_signed"] = _parse_bool(want_signed)
        config_dict["service_provider"] = sp_section
        logger.debug("Override: want_assertions_signed from environment")

    return config_dict


def _apply_certificate_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply certificate path overrides.

    SP_METADATA_SIGNING_CERT_PATHS takes a comma-separated list of paths.
    """
    if signing_cert_paths := os.getenv(f"{ENV_PREFIX}SIGNING_CERT_PATHS"):
        config_dict.setdefault("certificates", {})["signing_cert_paths"] = [
            path.strip() for path in signing_cert_paths.split(",") if path.strip()
        ]
        logger.debug("Override: signing_cert_paths from environment")

    if private_key_path := os.getenv(f"{ENV_PREFIX}PRIVATE_KEY_PATH"):
        config_dict.setdefault("certificates", {})["private_key_path"] = private_key_path
        logger.debug("Override: private_key_path from environment")

    if decryption_cert_path := os.getenv(f"{ENV_PREFIX}DECRYPTION_CERT_PATH"):
        config_dict.setdefault("certificates", {})[
            "decryption_cert_path"
        ] = decryption_cert_path
        logger.debug("Override: decryption_cert_path from environment")

    if decryption_key_path := os.getenv(f"{ENV_PREFIX}DECRYPTION_KEY_PATH"):
        config_dict.setdefault("certificates", {})[
            "decryption_key_path"
        ] = decryption_key_path
        logger.debug("Override: decryption_key_path from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def _check_sensitive_values(config_dict: dict[str, Any]) -> None:
    """Warn when secrets are stored in the configuration file.

    Key passwords belong in environment variables, not configuration files.
    """
    certs = config_dict.get("certificates") or {}
    if "key_password" in certs:
        logger.warning(
            "WARNING: Private key password found in configuration file! "
            "Passwords should be stored in environment variables, not config files. "
            f"Use {ENV_PREFIX}KEY_PASSWORD environment variable instead."
        )


def get_key_password(config: Config) -> Optional[bytes]:
    """Read the private key password from the configured environment variable.

    Returns:
        Password bytes, or None when the variable is unset or empty
    """
    env_var = config.certificates.key_password_env_var
    if not env_var:
        return None
    password = os.getenv(env_var)
    return password.encode("utf-8") if password else None


def get_service_provider_settings(config: Config) -> Optional[ServiceProviderSettings]:
    """Get service provider settings, or None if not configured."""
    return config.service_provider


def get_certificates_config(config: Config) -> CertificatesConfig:
    """Get certificate paths configuration."""
    return config.certificates


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration."""
    return config.logging
