"""Unit tests for configuration loading and validation."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from saml_sp_metadata.config import (
    CertificatesConfig,
    Config,
    LoggingConfig,
    ServiceProviderSettings,
    get_key_password,
    get_service_provider_settings,
    load_config,
)
from saml_sp_metadata.utils.exceptions import ConfigurationError


def _write_config(tmp_path: Path, data) -> Path:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(data))
    return config_file


class TestSchemaValidation:
    """Tests for pydantic schema models."""

    def test_service_provider_minimal(self):
        """Test minimal service provider settings use defaults."""
        sp = ServiceProviderSettings(issuer="sp1", callback_url="https://sp/acs")
        assert sp.want_assertions_signed is False
        assert sp.logout_callback_url is None
        assert sp.identifier_format is None

    def test_service_provider_partial(self):
        """Test SP fields may be left for the command line to fill in."""
        sp = ServiceProviderSettings(issuer="sp1")
        assert sp.issuer == "sp1"
        assert sp.callback_url is None
        assert ServiceProviderSettings().issuer is None

    def test_empty_issuer_rejected(self):
        """Test empty issuer fails validation."""
        with pytest.raises(ValidationError):
            ServiceProviderSettings(issuer="", callback_url="https://sp/acs")

    def test_invalid_callback_url_rejected(self):
        """Test non-HTTP callback URL fails validation."""
        with pytest.raises(ValidationError, match="Invalid URL"):
            ServiceProviderSettings(issuer="sp1", callback_url="ftp://sp/acs")

    def test_invalid_logout_url_rejected(self):
        """Test non-HTTP logout URL fails validation."""
        with pytest.raises(ValidationError, match="Invalid URL"):
            ServiceProviderSettings(
                issuer="sp1",
                callback_url="https://sp/acs",
                logout_callback_url="sp/slo",
            )

    def test_log_level_uppercased(self):
        """Test log level is normalized to uppercase."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        """Test unknown log level fails validation."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingConfig(level="VERBOSE")

    def test_private_key_without_signing_certs_rejected(self):
        """Test signing key path requires at least one certificate path."""
        with pytest.raises(ValidationError, match="signing_cert_paths is empty"):
            CertificatesConfig(private_key_path=Path("key.pem"))

    def test_decryption_key_without_cert_rejected(self):
        """Test decryption key path requires a certificate path."""
        with pytest.raises(ValidationError, match="decryption_cert_path is missing"):
            CertificatesConfig(decryption_key_path=Path("key.pem"))

    def test_certificates_without_keys_allowed(self):
        """Test certificate paths alone are accepted."""
        certs = CertificatesConfig(
            signing_cert_paths=[Path("a.pem"), Path("b.pem")],
            decryption_cert_path=Path("enc.pem"),
        )
        assert certs.signing_cert_paths == [Path("a.pem"), Path("b.pem")]

    def test_config_defaults(self):
        """Test root config defaults."""
        config = Config()
        assert config.service_provider is None
        assert config.logging.level == "INFO"
        assert config.output.pretty_print is True
        assert config.output.output_path is None
        assert config.certificates.key_password_env_var == "SP_METADATA_KEY_PASSWORD"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_uses_defaults(self, tmp_path, clean_env):
        """Test a missing file falls back to defaults."""
        config = load_config(tmp_path / "missing.json")
        assert config.service_provider is None
        assert config.logging.log_file == Path("logs/sp-metadata.log")
        assert config.certificates.signing_cert_paths == []

    def test_load_valid_file(self, tmp_path, clean_env):
        """Test values are read from a JSON file."""
        config_file = _write_config(tmp_path, {
            "service_provider": {
                "issuer": "https://sp.example.com/metadata",
                "callback_url": "https://sp.example.com/acs",
                "want_assertions_signed": True,
            },
            "certificates": {
                "signing_cert_paths": ["certs/sp.pem"],
                "private_key_path": "certs/sp-key.pem",
            },
            "output": {"pretty_print": False},
        })

        config = load_config(config_file)

        sp = get_service_provider_settings(config)
        assert sp.issuer == "https://sp.example.com/metadata"
        assert sp.want_assertions_signed is True
        assert config.certificates.signing_cert_paths == [Path("certs/sp.pem")]
        assert config.certificates.private_key_path == Path("certs/sp-key.pem")
        assert config.output.pretty_print is False

    def test_invalid_json_raises(self, tmp_path, clean_env):
        """Test malformed JSON raises ConfigurationError."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(config_file)

    def test_non_object_raises(self, tmp_path, clean_env):
        """Test a top-level JSON array raises ConfigurationError."""
        config_file = _write_config(tmp_path, ["a", "b"])
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(config_file)

    def test_validation_error_wrapped(self, tmp_path, clean_env):
        """Test schema violations raise ConfigurationError."""
        config_file = _write_config(tmp_path, {
            "service_provider": {"issuer": "sp1", "callback_url": "not-a-url"},
        })
        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            load_config(config_file)

    def test_password_in_file_warns(self, tmp_path, clean_env, caplog):
        """Test a key password stored in the file logs a warning."""
        config_file = _write_config(tmp_path, {
            "certificates": {"key_password": "secret"},
        })
        with caplog.at_level(logging.WARNING):
            load_config(config_file)
        assert "password found in configuration file" in caplog.text


class TestEnvironmentOverrides:
    """Tests for SP_METADATA_* environment overrides."""

    def test_service_provider_from_environment(self, tmp_path, clean_env):
        """Test SP settings can come entirely from the environment."""
        clean_env.setenv("SP_METADATA_ISSUER", "urn:env:sp")
        clean_env.setenv("SP_METADATA_CALLBACK_URL", "https://env/acs")
        clean_env.setenv("SP_METADATA_WANT_ASSERTIONS_SIGNED", "yes")

        config = load_config(tmp_path / "missing.json")

        assert config.service_provider.issuer == "urn:env:sp"
        assert config.service_provider.callback_url == "https://env/acs"
        assert config.service_provider.want_assertions_signed is True

    def test_partial_service_provider_from_environment(self, tmp_path, clean_env):
        """Test an issuer alone in the environment loads without a callback URL."""
        clean_env.setenv("SP_METADATA_ISSUER", "urn:env:sp")

        config = load_config(tmp_path / "missing.json")

        assert config.service_provider.issuer == "urn:env:sp"
        assert config.service_provider.callback_url is None

    def test_environment_overrides_file(self, tmp_path, clean_env):
        """Test environment values take precedence over file values."""
        config_file = _write_config(tmp_path, {
            "service_provider": {"issuer": "file-sp", "callback_url": "https://file/acs"},
            "logging": {"level": "INFO"},
        })
        clean_env.setenv("SP_METADATA_ISSUER", "env-sp")
        clean_env.setenv("SP_METADATA_LOG_LEVEL", "debug")

        config = load_config(config_file)

        assert config.service_provider.issuer == "env-sp"
        assert config.service_provider.callback_url == "https://file/acs"
        assert config.logging.level == "DEBUG"

    def test_signing_cert_paths_comma_separated(self, tmp_path, clean_env):
        """Test signing certificate paths are split on commas."""
        clean_env.setenv("SP_METADATA_SIGNING_CERT_PATHS", "a.pem, b.pem,,")
        config = load_config(tmp_path / "missing.json")
        assert config.certificates.signing_cert_paths == [Path("a.pem"), Path("b.pem")]

    def test_output_overrides(self, tmp_path, clean_env):
        """Test output section overrides."""
        clean_env.setenv("SP_METADATA_PRETTY_PRINT", "false")
        clean_env.setenv("SP_METADATA_OUTPUT_PATH", "out/metadata.xml")
        config = load_config(tmp_path / "missing.json")
        assert config.output.pretty_print is False
        assert config.output.output_path == Path("out/metadata.xml")


class TestKeyPassword:
    """Tests for get_key_password function."""

    def test_password_from_environment(self, clean_env):
        """Test password is read from the configured variable."""
        clean_env.setenv("SP_METADATA_KEY_PASSWORD", "s3cret")
        assert get_key_password(Config()) == b"s3cret"

    def test_password_unset(self, clean_env):
        """Test unset variable yields None."""
        assert get_key_password(Config()) is None

    def test_custom_variable(self, clean_env):
        """Test a custom variable name is honored."""
        clean_env.setenv("MY_KEY_PASS", "pw")
        config = Config(certificates=CertificatesConfig(key_password_env_var="MY_KEY_PASS"))
        assert get_key_password(config) == b"pw"
