"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _validate_http_url(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.startswith(("http://", "https://")):
        raise ValueError(f"Invalid URL: {v}. Must start with http:// or https://")
    return v


class ServiceProviderSettings(BaseModel):
    """Service Provider identity and endpoints.

    Every field is optional here: a configuration file or the environment may
    hold only part of the identity and leave the rest to command-line
    options. The metadata command checks that issuer and callback_url are
    present once all sources are merged.

    Attributes:
        issuer: SP entity identifier (entityID)
        callback_url: AssertionConsumerService URL (HTTP-POST)
        logout_callback_url: SingleLogoutService URL (HTTP-POST)
        identifier_format: Requested NameID format URI
        want_assertions_signed: Whether the SP requires signed assertions

    Example:
        >>> sp = ServiceProviderSettings(
        ...     issuer="https://sp.example.com/metadata",
        ...     callback_url="https://sp.example.com/saml/acs",
        ... )
    """

    issuer: Optional[str] = Field(default=None, description="SP entity ID")
    callback_url: Optional[str] = Field(
        default=None, description="AssertionConsumerService URL"
    )
    logout_callback_url: Optional[str] = Field(
        default=None, description="SingleLogoutService URL"
    )
    identifier_format: Optional[str] = Field(
        default=None, description="Requested NameID format URI"
    )
    want_assertions_signed: bool = Field(
        default=False, description="Require signed assertions"
    )

    @field_validator("issuer")
    @classmethod
    def validate_issuer(cls, v: Optional[str]) -> Optional[str]:
        """Reject an empty entity ID.

        Raises:
            ValueError: If issuer is an empty string
        """
        if v is not None and not v:
            raise ValueError("issuer must not be empty")
        return v

    @field_validator("callback_url", "logout_callback_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate endpoint URL is HTTP/HTTPS.

        Raises:
            ValueError: If URL does not start with http:// or https://
        """
        return _validate_http_url(v)


class CertificatesConfig(BaseModel):
    """Configuration for certificate and key paths.

    Attributes:
        signing_cert_paths: Signing certificates in rollover order (first preferred)
        private_key_path: Signing private key
        decryption_cert_path: Encryption certificate
        decryption_key_path: Decryption private key
        key_password_env_var: Environment variable holding the key password
    """

    signing_cert_paths: List[Path] = Field(default_factory=list)
    private_key_path: Optional[Path] = None
    decryption_cert_path: Optional[Path] = None
    decryption_key_path: Optional[Path] = None
    key_password_env_var: Optional[str] = Field(
        default="SP_METADATA_KEY_PASSWORD",
        description="Environment variable for private key password",
    )

    @model_validator(mode="after")
    def validate_key_pairs(self) -> "CertificatesConfig":
        """Validate every private key has a certificate.

        Raises:
            ValueError: If a private key path is set without its certificate path
        """
        if self.decryption_key_path is not None and self.decryption_cert_path is None:
            raise ValueError(
                "decryption_key_path is set but decryption_cert_path is missing. "
                "Fix: Provide the decryption certificate or remove the key."
            )
        if self.private_key_path is not None and not self.signing_cert_paths:
            raise ValueError(
                "private_key_path is set but signing_cert_paths is empty. "
                "Fix: Provide at least one signing certificate or remove the key."
            )
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_secrets: Whether to redact key material from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/sp-metadata.log"),
        description="Log file path"
    )
    redact_secrets: bool = Field(
        default=False,
        description="Redact private keys and certificates from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class OutputConfig(BaseModel):
    """Configuration for metadata output.

    Attributes:
        pretty_print: Indent generated XML
        output_path: File to write metadata to (stdout when unset)
    """

    pretty_print: bool = True
    output_path: Optional[Path] = None


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        service_provider: SP identity and endpoints (may be supplied on the CLI instead)
        certificates: Certificate and key paths
        logging: Logging configuration
        output: Metadata output configuration

    Example:
        >>> config = Config(
        ...     service_provider=ServiceProviderSettings(
        ...         issuer="urn:example:sp",
        ...         callback_url="https://sp.example.com/acs",
        ...     )
        ... )
        >>> config.output.pretty_print
        True
    """

    service_provider: Optional[ServiceProviderSettings] = None
    certificates: CertificatesConfig = CertificatesConfig()
    logging: LoggingConfig = LoggingConfig()
    output: OutputConfig = OutputConfig()
