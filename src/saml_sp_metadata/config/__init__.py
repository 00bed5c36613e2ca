"""Config module.

This module provides configuration management functionality.
"""

from saml_sp_metadata.config.manager import (
    get_certificates_config,
    get_key_password,
    get_logging_config,
    get_service_provider_settings,
    load_config,
)
from saml_sp_metadata.config.schema import (
    CertificatesConfig,
    Config,
    LoggingConfig,
    OutputConfig,
    ServiceProviderSettings,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_certificates_config",
    "get_key_password",
    "get_logging_config",
    "get_service_provider_settings",
    # Configuration models
    "CertificatesConfig",
    "Config",
    "LoggingConfig",
    "OutputConfig",
    "ServiceProviderSettings",
]
