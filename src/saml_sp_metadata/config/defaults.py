"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Fallback when no configuration file is present. The service_provider section
# is left empty: issuer and callback URL must come from a file, the
# environment, or CLI options.
DEFAULT_CONFIG: dict[str, Any] = {
    "certificates": {
        "signing_cert_paths": [],
        "private_key_path": None,
        "decryption_cert_path": None,
        "decryption_key_path": None,
        "key_password_env_var": "SP_METADATA_KEY_PASSWORD",
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/sp-metadata.log",
        # Key material is not redacted by default (opt-in)
        "redact_secrets": False,
    },
    "output": {
        "pretty_print": True,
        "output_path": None,
    },
}

DEFAULT_CONFIG_PATH = "config/config.json"
