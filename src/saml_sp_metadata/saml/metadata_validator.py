"""Precondition validation for SP metadata generation.

Enforces the coupling rules between private keys and the certificates that
advertise the corresponding capability, and resolves the signing certificate
input into a SigningCertificates variant exactly once.
"""

import logging
from typing import Optional, Sequence, Union

from ..models.metadata import (
    MetadataConfig,
    MultipleCertificates,
    NoSigning,
    ResolvedMetadataConfig,
    SigningCertificates,
    SingleCertificate,
)
from ..utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _resolve_decryption_cert(config: MetadataConfig) -> Optional[str]:
    """Resolve the decryption certificate.

    Raises:
        ConfigurationError: If a decryption key is supplied without a certificate
    """
    if config.decryption_private_key is None:
        if config.decryption_cert is not None:
            logger.warning(
                "Decryption certificate supplied without a decryption private key; "
                "ignoring it, encryption will not be advertised"
            )
        return None

    if not config.decryption_cert:
        raise ConfigurationError(
            "Missing decryption certificate while generating metadata for a "
            "decrypting service provider. Provide decryption_cert or remove "
            "decryption_private_key."
        )
    return config.decryption_cert


def _resolve_signing_certs(config: MetadataConfig) -> SigningCertificates:
    """Resolve signing certificates into a SigningCertificates variant.

    Raises:
        ConfigurationError: If a signing key is supplied without certificates
    """
    signing_certs: Union[None, str, Sequence[str]] = config.signing_certs

    if config.private_key is None:
        if signing_certs:
            logger.warning(
                "Signing certificate(s) supplied without a signing private key; "
                "ignoring them, AuthnRequestsSigned will not be declared"
            )
        return NoSigning()

    if not signing_certs:
        raise ConfigurationError(
            "Missing signing certificate while generating metadata for a service "
            "provider that signs its messages. Provide signing_certs or remove "
            "private_key."
        )

    if isinstance(signing_certs, (str, bytes)):
        return SingleCertificate(certificate=signing_certs)

    return MultipleCertificates(certificates=tuple(signing_certs))


def resolve_metadata_config(config: MetadataConfig) -> ResolvedMetadataConfig:
    """Validate cross-field preconditions and resolve the metadata configuration.

    Decryption material is checked before signing material, so when both
    preconditions are violated the decryption error is raised.

    Args:
        config: Caller-supplied metadata configuration (never mutated)

    Returns:
        ResolvedMetadataConfig ready for document assembly

    Raises:
        ConfigurationError: If a private key is supplied without its certificate

    Example:
        >>> resolved = resolve_metadata_config(
        ...     MetadataConfig(issuer="sp1", callback_url="https://sp/acs")
        ... )
        >>> resolved.has_key_material
        False
    """
    decryption_cert = _resolve_decryption_cert(config)
    signing = _resolve_signing_certs(config)

    logger.debug(
        f"Resolved metadata configuration: issuer={config.issuer}, "
        f"signing_certs={len(signing.certificates)}, "
        f"decryption={'enabled' if decryption_cert is not None else 'disabled'}"
    )

    return ResolvedMetadataConfig(
        issuer=config.issuer,
        callback_url=config.callback_url,
        want_assertions_signed=config.want_assertions_signed,
        logout_callback_url=config.logout_callback_url,
        identifier_format=config.identifier_format,
        signing=signing,
        decryption_cert=decryption_cert,
    )
